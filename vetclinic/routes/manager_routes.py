from flask import current_app
from flask_restx import Namespace, Resource, fields

from vetclinic import db
from vetclinic.services.appointment_service import AppointmentService
from vetclinic.services.request_service import RequestService
from vetclinic.utils.util import get_json_body, permission_required

manager_ns = Namespace('manager', description='Операции менеджера: обработка заявок и запись к врачу',
                       path='/manager')

status_model = manager_ns.model('RequestStatusInput', {
    'status_id': fields.Integer(required=True)
})

appointment_model = manager_ns.model('AppointmentInput', {
    'visit_date': fields.String(required=True, description='YYYY-MM-DD'),
    'visit_time': fields.String(required=True, description='HH:MM или HH:MM:SS'),
    'doctor_id': fields.Integer(required=True, description='Идентификатор пользователя-ветеринара'),
    'client_id': fields.Integer(required=True),
    'request_id': fields.Integer(required=True)
})


def _request_service():
    return RequestService(db.session, default_status=current_app.config.get('DEFAULT_REQUEST_STATUS', 'NEW'))


@manager_ns.route('/request')
class RequestList(Resource):
    @permission_required('view_all_requests')
    @manager_ns.doc(security='BearerAuth')
    def get(self):
        """Все заявки клиентов с услугами и питомцами"""
        return {'requests': _request_service().list_all_requests()}, 200


@manager_ns.route('/request/<int:request_id>')
class RequestItem(Resource):
    @permission_required('view_all_requests')
    @manager_ns.doc(security='BearerAuth')
    def get(self, request_id):
        return {'request': _request_service().get_request(request_id)}, 200

    @permission_required('update_request_status')
    @manager_ns.doc(security='BearerAuth')
    @manager_ns.expect(status_model)
    def put(self, request_id):
        """Смена статуса заявки"""
        return {'request': _request_service().update_status(request_id, get_json_body())}, 200


@manager_ns.route('/appointment')
class AppointmentCreate(Resource):
    @permission_required('create_appointment')
    @manager_ns.doc(security='BearerAuth')
    @manager_ns.expect(appointment_model)
    @manager_ns.response(201, 'Запись создана')
    @manager_ns.response(409, 'На заявку уже есть запись')
    def post(self):
        """Запись клиента на приём к ветеринару по заявке"""
        return {'appointment': AppointmentService(db.session).create_appointment(get_json_body())}, 201


@manager_ns.route('/status')
class StatusList(Resource):
    @permission_required('view_statuses')
    @manager_ns.doc(security='BearerAuth')
    def get(self):
        """Справочник статусов заявок"""
        return {'statuses': _request_service().list_statuses()}, 200
