from vetclinic.models import ClientRequest, Status, Appointment
from vetclinic.repositories.base import BaseRepository


class StatusRepository(BaseRepository):
    model = Status

    def get_by_name(self, name):
        return self.find_one_by(name=name)


class RequestRepository(BaseRepository):
    model = ClientRequest

    def list_by_client(self, user_id):
        return self.query().filter_by(user_id=user_id).order_by(ClientRequest.id).all()


class AppointmentRepository(BaseRepository):
    model = Appointment

    def get_by_request(self, request_id):
        return self.find_one_by(client_request_id=request_id)

    def list_by_client(self, user_id):
        return (self.query().filter_by(user_id=user_id)
                .order_by(Appointment.visit_date, Appointment.visit_time).all())

    def list_by_doctor(self, doctor_id):
        return (self.query().filter_by(doctor_id=doctor_id)
                .order_by(Appointment.visit_date, Appointment.visit_time).all())
