from flask import current_app, g
from flask_restx import Namespace, Resource, fields, reqparse
from werkzeug.datastructures import FileStorage

from vetclinic import db
from vetclinic.services.appointment_service import AppointmentService
from vetclinic.services.catalog_service import ServiceCatalog
from vetclinic.services.doctor_service import DoctorService
from vetclinic.services.pet_service import PetService
from vetclinic.services.request_service import RequestService
from vetclinic.utils.util import get_json_body, permission_required

client_ns = Namespace('client', description='Операции клиента: питомцы, заявки, записи на приём',
                      path='/client')

pet_parser = reqparse.RequestParser()
pet_parser.add_argument('name', type=str, location='form', help='Кличка питомца')
pet_parser.add_argument('breed', type=str, location='form', help='Порода')
pet_parser.add_argument('age', type=str, location='form', help='Возраст, полных лет')
pet_parser.add_argument('sex', type=str, location='form', help='M - мужской, F - женский')
pet_parser.add_argument('weight', type=str, location='form', help='Вес, кг')
pet_parser.add_argument('image', type=FileStorage, location='files', help='Фотография питомца')

request_model = client_ns.model('ClientRequestInput', {
    'pet_id': fields.Integer(required=True),
    'service_id': fields.Raw(required=True, description='Идентификатор услуги или список идентификаторов',
                             example=[1, 2]),
    'request_date': fields.String(description='YYYY-MM-DD, по умолчанию сегодня'),
    'description': fields.String(),
    'status_id': fields.Integer(description='По умолчанию начальный статус')
})


def _pet_service():
    return PetService(db.session, current_app.config['UPLOAD_FOLDER'])


def _request_service():
    return RequestService(db.session, default_status=current_app.config.get('DEFAULT_REQUEST_STATUS', 'NEW'))


def _pet_args():
    args = pet_parser.parse_args()
    image = args.pop('image', None)
    return dict(args), image


@client_ns.route('/service')
class PublicServiceList(Resource):
    def get(self):
        """Каталог услуг клиники"""
        return {'services': ServiceCatalog(db.session).list_services()}, 200


@client_ns.route('/service/<int:service_id>')
class PublicServiceItem(Resource):
    def get(self, service_id):
        return {'service': ServiceCatalog(db.session).get_service(service_id)}, 200


@client_ns.route('/doctor')
class PublicDoctorList(Resource):
    def get(self):
        """Ветеринары клиники"""
        return {'doctors': DoctorService(db.session).list_doctors()}, 200


@client_ns.route('/doctor/<int:user_id>')
class PublicDoctorItem(Resource):
    def get(self, user_id):
        return {'doctor': DoctorService(db.session).get_doctor(user_id)}, 200


@client_ns.route('/pet')
class PetList(Resource):
    @permission_required('manage_own_pets')
    @client_ns.doc(security='BearerAuth')
    def get(self):
        """Питомцы текущего клиента"""
        return {'pets': _pet_service().list_pets(g.principal['id'])}, 200

    @permission_required('manage_own_pets')
    @client_ns.doc(security='BearerAuth')
    @client_ns.expect(pet_parser)
    def post(self):
        """Добавление питомца, фотография обязательна"""
        data, image = _pet_args()
        return {'pet': _pet_service().create_pet(g.principal['id'], data, image)}, 201


@client_ns.route('/pet/<int:pet_id>')
class PetItem(Resource):
    @permission_required('manage_own_pets')
    @client_ns.doc(security='BearerAuth')
    def get(self, pet_id):
        return {'pet': _pet_service().get_pet(pet_id, g.principal['id'])}, 200

    @permission_required('manage_own_pets')
    @client_ns.doc(security='BearerAuth')
    @client_ns.expect(pet_parser)
    def put(self, pet_id):
        """Изменение питомца: меняются только переданные поля"""
        data, image = _pet_args()
        return {'pet': _pet_service().update_pet(pet_id, g.principal['id'], data, image)}, 200

    @permission_required('manage_own_pets')
    @client_ns.doc(security='BearerAuth')
    def delete(self, pet_id):
        _pet_service().delete_pet(pet_id, g.principal['id'])
        return {'message': f'Питомец с идентификатором {pet_id} удалён'}, 200


@client_ns.route('/request')
class RequestList(Resource):
    @permission_required('view_own_requests')
    @client_ns.doc(security='BearerAuth')
    def get(self):
        """Заявки текущего клиента с услугами и питомцем"""
        return {'requests': _request_service().list_client_requests(g.principal['id'])}, 200

    @permission_required('create_request')
    @client_ns.doc(security='BearerAuth')
    @client_ns.expect(request_model)
    def post(self):
        """Оформление заявки на одну или несколько услуг"""
        request = _request_service().create_request(g.principal['id'], get_json_body())
        return {'request': request}, 201


@client_ns.route('/request/<int:request_id>')
class RequestItem(Resource):
    @permission_required('view_own_requests')
    @client_ns.doc(security='BearerAuth')
    def get(self, request_id):
        return {'request': _request_service().get_client_request(request_id, g.principal['id'])}, 200


@client_ns.route('/appointment')
class AppointmentList(Resource):
    @permission_required('view_own_appointments')
    @client_ns.doc(security='BearerAuth')
    def get(self):
        """Записи на приём текущего клиента"""
        appointments = AppointmentService(db.session).list_client_appointments(g.principal['id'])
        return {'appointments': appointments}, 200


@client_ns.route('/appointment/<int:appointment_id>')
class AppointmentItem(Resource):
    @permission_required('view_own_appointments')
    @client_ns.doc(security='BearerAuth')
    def get(self, appointment_id):
        appointment = AppointmentService(db.session).get_client_appointment(appointment_id, g.principal['id'])
        return {'appointment': appointment}, 200

    @permission_required('cancel_own_appointment')
    @client_ns.doc(security='BearerAuth')
    def delete(self, appointment_id):
        """Отмена записи на приём"""
        AppointmentService(db.session).delete_client_appointment(appointment_id, g.principal['id'])
        return {'message': f'Запись на приём с идентификатором {appointment_id} отменена'}, 200
