# Doctor service module: a doctor is a User with role DOCTOR plus its Doctor profile
import logging

from vetclinic.errors import ConflictError, NotFoundError
from vetclinic.models import Doctor, Role
from vetclinic.repositories import UserRepository, DoctorRepository, PostRepository
from vetclinic.services.auth_service import (
    AuthService, check_password, check_user_fields, format_user, hash_password
)
from vetclinic.services.base_service import BaseService
from vetclinic.services.catalog_service import format_post
from vetclinic.utils.validation import ValidationResult, is_identifier, is_integer, to_int

logger = logging.getLogger(__name__)


def format_doctor(user):
    data = format_user(user)
    doctor = user.doctor
    data['doctor'] = {
        'id': doctor.id,
        'experience': doctor.experience,
        'post_id': doctor.post_id,
        'post': format_post(doctor.post) if doctor.post else None
    } if doctor else None
    return data


class DoctorService(BaseService):
    """Doctors are addressed by the id of their backing User."""

    def __init__(self, session, users=None, doctors=None, posts=None):
        super().__init__(session)
        self.users = users or UserRepository(session)
        self.doctors = doctors or DoctorRepository(session)
        self.posts = posts or PostRepository(session)
        self.auth = AuthService(session, users=self.users)

    def _check_profile_fields(self, data, result, partial=False):
        if not partial or data.get('experience') is not None:
            experience = data.get('experience')
            result.check(is_integer(experience) and to_int(experience) >= 0,
                         'Некорректно указан стаж работы ветеринара!')
        if not partial or data.get('post_id') is not None:
            result.check(is_identifier(data.get('post_id')), 'Некорректно указан идентификатор должности!')

    def _get_post(self, post_id):
        post = self.posts.get_by_id(to_int(post_id))
        if not post:
            raise NotFoundError(f'Должности с идентификатором {post_id} не найдено!')
        return post

    def _get_or_404(self, user_id):
        user = self.users.get_by_id(user_id)
        if not user or user.role != Role.DOCTOR:
            raise NotFoundError(f'Ветеринар с идентификатором {user_id} не найден!')
        return user

    def create_doctor(self, data):
        result = ValidationResult()
        check_user_fields(data, result)
        self._check_profile_fields(data, result)
        result.raise_if_invalid()

        post = self._get_post(data['post_id'])
        self.auth.ensure_contacts_free(phone=data['phone'], email=data['email'])

        with self.atomic():
            user = self.users.add(self.auth.build_user(data, Role.DOCTOR))
            self.doctors.add(Doctor(
                experience=to_int(data['experience']),
                post_id=post.id,
                user_id=user.id
            ))
        logger.info(f"Created doctor {user.id} with post {post.name}")
        return format_doctor(user)

    def list_doctors(self):
        return [format_doctor(user) for user in self.users.list_doctors()]

    def get_doctor(self, user_id):
        return format_doctor(self._get_or_404(user_id))

    def update_doctor(self, user_id, data):
        result = ValidationResult()
        check_user_fields(data, result, partial=True)
        self._check_profile_fields(data, result, partial=True)
        result.raise_if_invalid()

        user = self._get_or_404(user_id)
        doctor = user.doctor

        user_changes = {}
        if data.get('fio') is not None and data['fio'].strip() != user.fio:
            user_changes['fio'] = data['fio'].strip()
        for field in ('phone', 'email'):
            if data.get(field) is not None and data[field] != getattr(user, field):
                user_changes[field] = data[field]
        if data.get('password') is not None and not check_password(user.password, data['password']):
            user_changes['password'] = hash_password(data['password'])

        doctor_changes = {}
        if doctor is None:
            raise NotFoundError(f'Профиль ветеринара {user_id} не найден!')
        if data.get('experience') is not None and to_int(data['experience']) != doctor.experience:
            doctor_changes['experience'] = to_int(data['experience'])
        if data.get('post_id') is not None and to_int(data['post_id']) != doctor.post_id:
            doctor_changes['post_id'] = self._get_post(data['post_id']).id

        if not user_changes and not doctor_changes:
            return format_doctor(user)

        self.auth.ensure_contacts_free(
            phone=user_changes.get('phone'), email=user_changes.get('email'), user_id=user.id
        )
        with self.atomic():
            for field, value in user_changes.items():
                setattr(user, field, value)
            for field, value in doctor_changes.items():
                setattr(doctor, field, value)
        logger.info(f"Updated doctor {user.id}: {sorted(list(user_changes) + list(doctor_changes))}")
        return format_doctor(user)

    def delete_doctor(self, user_id):
        user = self._get_or_404(user_id)
        doctor = user.doctor
        if doctor is not None and doctor.appointments:
            raise ConflictError('Нельзя удалить ветеринара: у него есть назначенные приёмы.')
        with self.atomic():
            if doctor is not None:
                self.doctors.delete(doctor)
            self.users.delete(user)
        logger.info(f"Deleted doctor {user_id}")
