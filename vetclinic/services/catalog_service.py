# Catalog service module: service categories, clinic services and staff posts
import logging
from decimal import Decimal

from vetclinic.errors import ConflictError, NotFoundError
from vetclinic.models import ServicesCategory, ClinicService, Post
from vetclinic.repositories import CategoryRepository, ClinicServiceRepository, PostRepository
from vetclinic.services.base_service import BaseService
from vetclinic.utils.validation import (
    ValidationResult, is_identifier, is_non_empty_string, is_number, to_float, to_int
)

logger = logging.getLogger(__name__)

# Numeric(10, 2) price column
MAX_PRICE = 10 ** 8


def format_category(category):
    return {
        'id': category.id,
        'name': category.name
    }


def format_post(post):
    return {
        'id': post.id,
        'name': post.name
    }


def format_service(service):
    return {
        'id': service.id,
        'name': service.name,
        'price': float(service.price) if service.price is not None else None,
        'description': service.description,
        'category_id': service.category_id
    }


class NamedEntityService(BaseService):
    """CRUD for reference rows that consist of a unique name only."""

    model = None
    repository_class = None
    formatter = None
    invalid_name_message = None
    not_found_message = None
    duplicate_message = None

    def __init__(self, session, repository=None):
        super().__init__(session)
        self.repository = repository or self.repository_class(session)

    def format(self, entity):
        return type(self).formatter(entity)

    def _validate_name(self, name):
        result = ValidationResult()
        result.check(is_non_empty_string(name), self.invalid_name_message)
        result.raise_if_invalid()
        return name.strip()

    def _get_or_404(self, entity_id):
        entity = self.repository.get_by_id(entity_id)
        if not entity:
            raise NotFoundError(self.not_found_message.format(id=entity_id))
        return entity

    def create(self, data):
        name = self._validate_name(data.get('name'))
        if self.repository.exists_other(None, name=name):
            raise ConflictError(self.duplicate_message)
        with self.atomic():
            entity = self.repository.add(self.model(name=name))
        logger.info(f"Created {self.model.__name__} {entity.id}: {name}")
        return self.format(entity)

    def list_all(self):
        return [self.format(entity) for entity in self.repository.list_all()]

    def get(self, entity_id):
        return self.format(self._get_or_404(entity_id))

    def update(self, entity_id, data):
        entity = self._get_or_404(entity_id)
        if data.get('name') is None:
            return self.format(entity)
        name = self._validate_name(data.get('name'))
        if name == entity.name:
            return self.format(entity)
        if self.repository.exists_other(entity.id, name=name):
            raise ConflictError(self.duplicate_message)
        with self.atomic():
            entity.name = name
        return self.format(entity)

    def _check_can_delete(self, entity):
        pass

    def delete(self, entity_id):
        entity = self._get_or_404(entity_id)
        self._check_can_delete(entity)
        with self.atomic():
            self.repository.delete(entity)
        logger.info(f"Deleted {self.model.__name__} {entity_id}")


class CategoryService(NamedEntityService):
    model = ServicesCategory
    repository_class = CategoryRepository
    formatter = format_category
    invalid_name_message = 'Некорректно указано название категории услуги!'
    not_found_message = 'Категория с идентификатором {id} не найдена!'
    duplicate_message = 'Данная категория уже имеется в системе!'

    def _check_can_delete(self, category):
        if category.services:
            raise ConflictError('Нельзя удалить категорию: к ней привязаны услуги.')


class PostService(NamedEntityService):
    model = Post
    repository_class = PostRepository
    formatter = format_post
    invalid_name_message = 'Некорректно указано название должности!'
    not_found_message = 'Должности с идентификатором {id} не найдено!'
    duplicate_message = 'Данная должность уже имеется в системе!'

    def _check_can_delete(self, post):
        if post.doctors:
            raise ConflictError('Нельзя удалить должность: её занимают ветеринары.')


class ServiceCatalog(BaseService):
    """CRUD over the clinic services a client can request."""

    def __init__(self, session, services=None, categories=None):
        super().__init__(session)
        self.services = services or ClinicServiceRepository(session)
        self.categories = categories or CategoryRepository(session)

    def _check_fields(self, data, partial=False):
        result = ValidationResult()
        if not partial or data.get('name') is not None:
            result.check(is_non_empty_string(data.get('name')), 'Некорректно указано название услуги!')
        if not partial or data.get('price') is not None:
            result.check(is_number(data.get('price')) and 0 <= to_float(data.get('price')) < MAX_PRICE,
                         'Некорректно указана цена услуги!')
        if data.get('description') is not None:
            result.check(is_non_empty_string(data.get('description')), 'Некорректно указано описание услуги!')
        if not partial or data.get('category_id') is not None:
            result.check(is_identifier(data.get('category_id')),
                         'Некорректно указан идентификатор категории услуги!')
        result.raise_if_invalid()

    def _get_category(self, category_id):
        category = self.categories.get_by_id(to_int(category_id))
        if not category:
            raise NotFoundError(f'Категория с идентификатором {category_id} не найдена!')
        return category

    def _get_or_404(self, service_id):
        service = self.services.get_by_id(service_id)
        if not service:
            raise NotFoundError(f'Услуга с идентификатором {service_id} не найдена!')
        return service

    def create_service(self, data):
        self._check_fields(data)
        category = self._get_category(data['category_id'])
        name = data['name'].strip()
        if self.services.exists_other(None, name=name):
            raise ConflictError('Данная услуга уже существует в нашей системе!')
        with self.atomic():
            service = self.services.add(ClinicService(
                name=name,
                price=Decimal(str(data['price'])),
                description=data.get('description'),
                category_id=category.id
            ))
        logger.info(f"Created service {service.id}: {name}")
        return format_service(service)

    def list_services(self):
        return [format_service(s) for s in self.services.list_all()]

    def get_service(self, service_id):
        return format_service(self._get_or_404(service_id))

    def update_service(self, service_id, data):
        self._check_fields(data, partial=True)
        service = self._get_or_404(service_id)

        changes = {}
        if data.get('name') is not None and data['name'].strip() != service.name:
            changes['name'] = data['name'].strip()
        if data.get('price') is not None and Decimal(str(data['price'])) != Decimal(service.price):
            changes['price'] = Decimal(str(data['price']))
        if data.get('description') is not None and data['description'] != service.description:
            changes['description'] = data['description']
        if data.get('category_id') is not None and to_int(data['category_id']) != service.category_id:
            changes['category_id'] = self._get_category(data['category_id']).id
        if not changes:
            return format_service(service)

        if 'name' in changes and self.services.exists_other(service.id, name=changes['name']):
            raise ConflictError('Данная услуга уже существует в нашей системе!')
        with self.atomic():
            for field, value in changes.items():
                setattr(service, field, value)
        return format_service(service)

    def delete_service(self, service_id):
        service = self._get_or_404(service_id)
        if service.requests:
            raise ConflictError('Нельзя удалить услугу: она указана в заявках клиентов.')
        with self.atomic():
            self.services.delete(service)
        logger.info(f"Deleted service {service_id}")
