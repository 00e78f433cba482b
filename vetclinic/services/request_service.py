"""Client requests: creation with their linked services, client and manager reads,
and status changes.

A request always carries at least one service. The request row and its links
in ``services_request`` are written in the same transaction, after every
service id has been resolved.
"""
import logging
from datetime import date

from vetclinic.errors import AuthorizationError, NotFoundError, ValidationError
from vetclinic.models import ClientRequest, Role
from vetclinic.repositories import (
    ClinicServiceRepository, PetRepository, RequestRepository, StatusRepository, UserRepository
)
from vetclinic.services.base_service import BaseService
from vetclinic.services.catalog_service import format_service
from vetclinic.services.pet_service import format_pet
from vetclinic.utils.validation import (
    ValidationResult, is_date, is_identifier, is_non_empty_string, parse_date, to_int
)

logger = logging.getLogger(__name__)


def format_status(status):
    return {
        'id': status.id,
        'name': status.name
    }


def format_request(request):
    return {
        'id': request.id,
        'request_date': request.request_date.isoformat() if request.request_date else None,
        'description': request.description,
        'user_id': request.user_id,
        'pet_id': request.pet_id,
        'status_id': request.status_id,
        'status': request.status.name if request.status else None
    }


def format_request_with_services_and_pet(request):
    data = format_request(request)
    data['services'] = [format_service(s) for s in request.services]
    data['pet'] = format_pet(request.pet) if request.pet else None
    return data


def normalize_service_ids(value):
    """Accept one id or a list of ids; return the distinct ids in their given order."""
    if value is None:
        raise ValidationError('Пожалуйста, выберите хотя бы одну услугу!')
    values = value if isinstance(value, (list, tuple)) else [value]
    if not values:
        raise ValidationError('Пожалуйста, выберите хотя бы одну услугу!')

    result = ValidationResult()
    service_ids = []
    for item in values:
        if not result.check(is_identifier(item), f'Некорректно указан идентификатор услуги: {item}!'):
            continue
        service_id = to_int(item)
        if service_id not in service_ids:
            service_ids.append(service_id)
    result.raise_if_invalid()
    return service_ids


class RequestService(BaseService):
    def __init__(self, session, default_status='NEW', requests=None, statuses=None,
                 users=None, pets=None, services=None):
        super().__init__(session)
        self.default_status = default_status
        self.requests = requests or RequestRepository(session)
        self.statuses = statuses or StatusRepository(session)
        self.users = users or UserRepository(session)
        self.pets = pets or PetRepository(session)
        self.services = services or ClinicServiceRepository(session)

    def _get_status(self, status_id):
        status = self.statuses.get_by_id(to_int(status_id))
        if not status:
            raise NotFoundError(f'Статус с идентификатором {status_id} не найден!')
        return status

    def _get_default_status(self):
        status = self.statuses.get_by_name(self.default_status)
        if not status:
            raise NotFoundError(f'Начальный статус заявки {self.default_status} не найден!')
        return status

    def _get_or_404(self, request_id):
        request = self.requests.get_by_id(request_id)
        if not request:
            raise NotFoundError(f'Заявки с номером {request_id} не найдено!')
        return request

    def create_request(self, client_id, data):
        result = ValidationResult()
        result.check(is_identifier(client_id), 'Некорректно указан идентификатор клиента!')
        result.check(is_identifier(data.get('pet_id')), 'Некорректно указан идентификатор питомца!')
        if data.get('description') is not None:
            result.check(is_non_empty_string(data.get('description')), 'Некорректно указано описание заявки!')
        if data.get('request_date') is not None:
            result.check(is_date(data.get('request_date')),
                         'Некорректно указанная дата. Формат даты следующий: YYYY-MM-DD!')
        if data.get('status_id') is not None:
            result.check(is_identifier(data.get('status_id')), 'Некорректно указан идентификатор статуса заявки!')
        result.raise_if_invalid()
        service_ids = normalize_service_ids(data.get('service_id'))

        client = self.users.get_by_id(to_int(client_id))
        if not client or client.role != Role.USER:
            raise NotFoundError(f'Клиента с идентификатором {client_id} не найдено!')

        pet_id = to_int(data['pet_id'])
        pet = self.pets.get_by_id(pet_id)
        if not pet:
            raise NotFoundError(f'Питомца с идентификатором {pet_id} не найдено!')
        if pet.user_id != client.id:
            logger.warning(f"Client {client.id} tried to file a request for pet {pet_id} of client {pet.user_id}")
            raise AuthorizationError(f'Питомец с идентификатором {pet_id} не Ваш!')

        status = (self._get_status(data['status_id']) if data.get('status_id') is not None
                  else self._get_default_status())

        resolved = self.services.get_many(service_ids)
        for service_id, service in resolved.items():
            if service is None:
                raise NotFoundError(f'Услуги с идентификатором {service_id} не найдено!')

        with self.atomic():
            request = self.requests.add(ClientRequest(
                request_date=parse_date(data['request_date']) if data.get('request_date') else date.today(),
                description=data.get('description'),
                user_id=client.id,
                pet_id=pet.id,
                status_id=status.id,
                services=[resolved[service_id] for service_id in service_ids]
            ))
        logger.info(f"Client {client.id} created request {request.id} with services {service_ids}")
        return format_request_with_services_and_pet(request)

    def list_client_requests(self, client_id):
        return [format_request_with_services_and_pet(r) for r in self.requests.list_by_client(client_id)]

    def get_client_request(self, request_id, client_id):
        request = self._get_or_404(request_id)
        if request.user_id != client_id:
            logger.warning(f"Client {client_id} tried to read request {request_id} of client {request.user_id}")
            raise AuthorizationError(f'Заявка с номером {request_id} не Ваша!')
        return format_request_with_services_and_pet(request)

    def list_all_requests(self):
        return [format_request_with_services_and_pet(r) for r in self.requests.list_all()]

    def get_request(self, request_id):
        return format_request_with_services_and_pet(self._get_or_404(request_id))

    def update_status(self, request_id, data):
        result = ValidationResult()
        result.check(is_identifier(data.get('status_id')), 'Некорректно указан идентификатор статуса заявки!')
        result.raise_if_invalid()

        request = self._get_or_404(request_id)
        status = self._get_status(data['status_id'])
        if status.id == request.status_id:
            return format_request_with_services_and_pet(request)

        old_status = request.status.name if request.status else None
        with self.atomic():
            request.status_id = status.id
        logger.info(f"Request {request.id} status changed {old_status} -> {status.name}")
        return format_request_with_services_and_pet(request)

    def list_statuses(self):
        return [format_status(s) for s in self.statuses.list_all()]
