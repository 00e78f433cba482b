# Appointment service module: turning a client request into a doctor visit
import logging

from vetclinic.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from vetclinic.models import Appointment, Role
from vetclinic.repositories import (
    AppointmentRepository, DoctorRepository, RequestRepository, UserRepository
)
from vetclinic.services.base_service import BaseService
from vetclinic.services.catalog_service import format_service
from vetclinic.services.doctor_service import format_doctor
from vetclinic.services.request_service import format_request
from vetclinic.utils.validation import (
    ValidationResult, is_date, is_identifier, is_time, parse_date, parse_time, to_int
)

logger = logging.getLogger(__name__)


def format_appointment(appointment):
    return {
        'id': appointment.id,
        'visit_date': appointment.visit_date.isoformat(),
        'visit_time': appointment.visit_time.strftime('%H:%M:%S'),
        'doctor_id': appointment.doctor_id,
        'user_id': appointment.user_id,
        'request_id': appointment.client_request_id
    }


def format_appointment_with_doctor_and_request(appointment):
    data = format_appointment(appointment)
    doctor = appointment.doctor
    data['doctor'] = format_doctor(doctor.user) if doctor else None
    request = appointment.request
    if request:
        data['request'] = format_request(request)
        data['request']['services'] = [format_service(s) for s in request.services]
    else:
        data['request'] = None
    return data


class AppointmentService(BaseService):
    def __init__(self, session, appointments=None, requests=None, users=None, doctors=None):
        super().__init__(session)
        self.appointments = appointments or AppointmentRepository(session)
        self.requests = requests or RequestRepository(session)
        self.users = users or UserRepository(session)
        self.doctors = doctors or DoctorRepository(session)

    def create_appointment(self, data):
        """Schedule a visit for a client request.

        Every lookup runs before the single write, in this order: client,
        request, request ownership, doctor user, doctor role, doctor profile,
        existing appointment for the request.
        """
        result = ValidationResult()
        result.check(is_date(data.get('visit_date')),
                     'Некорректно указанная дата. Формат даты следующий: YYYY-MM-DD!')
        result.check(is_time(data.get('visit_time')),
                     'Некорректно указанное время. Формат времени следующий: HH:MM!')
        result.check(is_identifier(data.get('doctor_id')), 'Некорректно указан идентификатор врача!')
        result.check(is_identifier(data.get('client_id')), 'Некорректно указан идентификатор клиента!')
        result.check(is_identifier(data.get('request_id')), 'Некорректно указан идентификатор заявки!')
        result.raise_if_invalid()

        client_id = to_int(data['client_id'])
        request_id = to_int(data['request_id'])
        doctor_user_id = to_int(data['doctor_id'])

        client = self.users.get_by_id(client_id)
        if not client:
            raise NotFoundError(f'Клиента с идентификатором {client_id} не найдено!')

        request = self.requests.get_by_id(request_id)
        if not request:
            raise NotFoundError(f'Заявки с номером {request_id} не найдено!')
        if request.user_id != client.id:
            raise AuthorizationError(
                f'Заявка с номером {request_id} не относится к пользователю c идентификатором {client_id}'
            )

        doctor_user = self.users.get_by_id(doctor_user_id)
        if not doctor_user:
            raise NotFoundError(f'Ветеринара с идентификатором {doctor_user_id} не найдено!')
        if doctor_user.role != Role.DOCTOR:
            raise ValidationError(f'Пользователь с идентификатором {doctor_user_id} не является ветеринаром!')

        doctor = self.doctors.get_by_user_id(doctor_user.id)
        if not doctor:
            raise NotFoundError(f'Профиль ветеринара с идентификатором {doctor_user_id} не найден!')

        if self.appointments.get_by_request(request.id):
            raise ConflictError(f'На заявку с номером {request_id} уже есть запись на приём!')

        with self.atomic():
            appointment = self.appointments.add(Appointment(
                visit_date=parse_date(data['visit_date']),
                visit_time=parse_time(data['visit_time']),
                doctor_id=doctor.id,
                user_id=client.id,
                client_request_id=request.id
            ))
        logger.info(f"Appointment {appointment.id} scheduled for request {request.id} with doctor {doctor.id}")
        return format_appointment_with_doctor_and_request(appointment)

    def _get_owned(self, appointment_id, client_id):
        appointment = self.appointments.get_by_id(appointment_id)
        if not appointment:
            raise NotFoundError(f'Записи на приём с идентификатором {appointment_id} не найдено!')
        if appointment.user_id != client_id:
            logger.warning(f"Client {client_id} tried to access appointment {appointment_id}")
            raise AuthorizationError(f'Запись на приём с идентификатором {appointment_id} не Ваша!')
        return appointment

    def list_client_appointments(self, client_id):
        return [format_appointment_with_doctor_and_request(a)
                for a in self.appointments.list_by_client(client_id)]

    def get_client_appointment(self, appointment_id, client_id):
        return format_appointment_with_doctor_and_request(self._get_owned(appointment_id, client_id))

    def delete_client_appointment(self, appointment_id, client_id):
        appointment = self._get_owned(appointment_id, client_id)
        with self.atomic():
            self.appointments.delete(appointment)
        logger.info(f"Client {client_id} cancelled appointment {appointment_id}")

    def list_doctor_appointments(self, doctor_user_id):
        doctor = self.doctors.get_by_user_id(doctor_user_id)
        if not doctor:
            raise NotFoundError(f'Профиль ветеринара с идентификатором {doctor_user_id} не найден!')
        return [format_appointment_with_doctor_and_request(a)
                for a in self.appointments.list_by_doctor(doctor.id)]
