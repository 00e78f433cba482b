# Pet service module for business logic
import logging
import os
import uuid

from vetclinic.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from vetclinic.models import ClientPet, PetSex, Role
from vetclinic.repositories import PetRepository, UserRepository
from vetclinic.services.base_service import BaseService
from vetclinic.utils.validation import (
    ValidationResult, is_integer, is_non_empty_string, is_number, to_float, to_int
)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif'}
IMAGE_URL_PREFIX = '/uploads/'


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def format_pet(pet):
    return {
        'id': pet.id,
        'name': pet.name,
        'breed': pet.breed,
        'image': pet.image,
        'image_url': f"{IMAGE_URL_PREFIX}{pet.image}" if pet.image else None,
        'age': pet.age,
        'sex': pet.sex,
        'weight': float(pet.weight) if pet.weight is not None else None,
        'user_id': pet.user_id
    }


def check_pet_fields(data, result, partial=False):
    def supplied(field):
        return not partial or data.get(field) is not None

    if supplied('name'):
        result.check(is_non_empty_string(data.get('name')), 'Некорректно указано имя питомца!')
    if supplied('breed'):
        result.check(is_non_empty_string(data.get('breed')), 'Некорректно указана порода питомца!')
    if supplied('age'):
        age = data.get('age')
        result.check(is_integer(age) and to_int(age) > 0,
                     'Некорректно указан возраст питомца!')
    if supplied('sex'):
        result.check(data.get('sex') in [s.value for s in PetSex],
                     'Пожалуйста, введите корректный пол: M - мужской, F - женский!')
    if supplied('weight'):
        weight = data.get('weight')
        result.check(is_number(weight) and to_float(weight) > 0, 'Некорректно указан вес питомца!')


class PetService(BaseService):
    """Pets are always handled on behalf of their owning client."""

    def __init__(self, session, upload_folder, pets=None, users=None):
        super().__init__(session)
        self.upload_folder = upload_folder
        self.pets = pets or PetRepository(session)
        self.users = users or UserRepository(session)

    def _get_client(self, client_id):
        user = self.users.get_by_id(client_id)
        if not user or user.role != Role.USER:
            raise NotFoundError(f'Клиент с идентификатором {client_id} не найден!')
        return user

    def get_owned_pet(self, pet_id, client_id):
        pet = self.pets.get_by_id(pet_id)
        if not pet:
            raise NotFoundError(f'Питомца с идентификатором {pet_id} не найдено!')
        if pet.user_id != client_id:
            logger.warning(f"Client {client_id} tried to access pet {pet_id} of client {pet.user_id}")
            raise AuthorizationError(f'Питомец с идентификатором {pet_id} не Ваш!')
        return pet

    def _check_image(self, image):
        if image is None or not image.filename:
            return False
        if not allowed_file(image.filename):
            raise ValidationError(
                f'Недопустимый формат изображения. Допустимые форматы: {sorted(ALLOWED_EXTENSIONS)}'
            )
        return True

    def save_image(self, image):
        file_name = f"{uuid.uuid4().hex}.jpg"
        os.makedirs(self.upload_folder, exist_ok=True)
        image.save(os.path.join(self.upload_folder, file_name))
        return file_name

    def remove_image(self, file_name):
        if not file_name:
            return
        path = os.path.join(self.upload_folder, file_name)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning(f"Image {path} was already missing")

    def create_pet(self, client_id, data, image):
        result = ValidationResult()
        check_pet_fields(data, result)
        result.raise_if_invalid()
        if not self._check_image(image):
            raise ValidationError('Пожалуйста, выберите изображение питомца!')
        self._get_client(client_id)

        file_name = self.save_image(image)
        try:
            with self.atomic():
                pet = self.pets.add(ClientPet(
                    name=data['name'].strip(),
                    breed=data['breed'].strip(),
                    image=file_name,
                    age=to_int(data['age']),
                    sex=data['sex'],
                    weight=to_float(data['weight']),
                    user_id=client_id
                ))
        except Exception:
            self.remove_image(file_name)
            raise
        logger.info(f"Client {client_id} created pet {pet.id}")
        return format_pet(pet)

    def list_pets(self, client_id):
        self._get_client(client_id)
        return [format_pet(p) for p in self.pets.list_by_owner(client_id)]

    def get_pet(self, pet_id, client_id):
        return format_pet(self.get_owned_pet(pet_id, client_id))

    def update_pet(self, pet_id, client_id, data, image=None):
        result = ValidationResult()
        check_pet_fields(data, result, partial=True)
        result.raise_if_invalid()
        has_image = self._check_image(image)
        pet = self.get_owned_pet(pet_id, client_id)

        changes = {}
        for field in ('name', 'breed'):
            if data.get(field) is not None and data[field].strip() != getattr(pet, field):
                changes[field] = data[field].strip()
        if data.get('age') is not None and to_int(data['age']) != pet.age:
            changes['age'] = to_int(data['age'])
        if data.get('sex') is not None and data['sex'] != pet.sex:
            changes['sex'] = data['sex']
        if data.get('weight') is not None and to_float(data['weight']) != pet.weight:
            changes['weight'] = to_float(data['weight'])
        if not changes and not has_image:
            return format_pet(pet)

        old_image = pet.image
        if has_image:
            changes['image'] = self.save_image(image)
        try:
            with self.atomic():
                for field, value in changes.items():
                    setattr(pet, field, value)
        except Exception:
            if has_image:
                self.remove_image(changes['image'])
            raise
        if has_image:
            self.remove_image(old_image)
        return format_pet(pet)

    def delete_pet(self, pet_id, client_id):
        pet = self.get_owned_pet(pet_id, client_id)
        if pet.requests or pet.medicine_cards:
            raise ConflictError('Нельзя удалить питомца: у него есть заявки или медицинские карты.')
        image = pet.image
        with self.atomic():
            self.pets.delete(pet)
        self.remove_image(image)
        logger.info(f"Client {client_id} deleted pet {pet_id}")
