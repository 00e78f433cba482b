from flask import g, request
from flask_restx import Namespace, Resource, fields

from vetclinic import db
from vetclinic.services.appointment_service import AppointmentService
from vetclinic.services.medicine_service import MedicineCardService
from vetclinic.utils.util import get_json_body, permission_required

doctor_ns = Namespace('doctor', description='Операции ветеринара: расписание и медицинские карты',
                      path='/doctor')

card_model = doctor_ns.model('MedicineCardInput', {
    'reason': fields.String(required=True, description='Причина приёма'),
    'description': fields.String(required=True, description='Описание приёма'),
    'visit_date': fields.String(required=True, description='YYYY-MM-DD'),
    'pet_id': fields.Integer(required=True)
})


@doctor_ns.route('/appointment')
class OwnAppointments(Resource):
    @permission_required('view_own_schedule')
    @doctor_ns.doc(security='BearerAuth')
    def get(self):
        """Записи на приём к текущему ветеринару"""
        appointments = AppointmentService(db.session).list_doctor_appointments(g.principal['id'])
        return {'appointments': appointments}, 200


@doctor_ns.route('/medicine')
class MedicineCardList(Resource):
    @permission_required('manage_medicine_cards')
    @doctor_ns.doc(security='BearerAuth')
    def get(self):
        """Все медицинские карты"""
        return {'medicine_cards': MedicineCardService(db.session).list_cards()}, 200

    @permission_required('manage_medicine_cards')
    @doctor_ns.doc(security='BearerAuth')
    @doctor_ns.expect(card_model)
    def post(self):
        return {'medicine_card': MedicineCardService(db.session).create_card(get_json_body())}, 201


@doctor_ns.route('/medicine/current')
class PetMedicineCards(Resource):
    @permission_required('manage_medicine_cards')
    @doctor_ns.doc(security='BearerAuth', params={'pet_id': 'Идентификатор питомца'})
    def get(self):
        """Медицинские карты одного питомца"""
        cards = MedicineCardService(db.session).list_pet_cards(request.args.get('pet_id'))
        return {'medicine_cards': cards}, 200


@doctor_ns.route('/medicine/<int:card_id>')
class MedicineCardItem(Resource):
    @permission_required('manage_medicine_cards')
    @doctor_ns.doc(security='BearerAuth')
    def get(self, card_id):
        return {'medicine_card': MedicineCardService(db.session).get_card(card_id)}, 200

    @permission_required('manage_medicine_cards')
    @doctor_ns.doc(security='BearerAuth')
    @doctor_ns.expect(card_model)
    def put(self, card_id):
        return {'medicine_card': MedicineCardService(db.session).update_card(card_id, get_json_body())}, 200

    @permission_required('manage_medicine_cards')
    @doctor_ns.doc(security='BearerAuth')
    def delete(self, card_id):
        MedicineCardService(db.session).delete_card(card_id)
        return {'message': f'Медицинская карта с номером {card_id} удалена'}, 200
