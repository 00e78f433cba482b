from datetime import date

from vetclinic import db
from vetclinic.models.relationship_model import services_request


class Status(db.Model):
    __tablename__ = 'status'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    requests = db.relationship('ClientRequest', backref='status', lazy=True)

    def __repr__(self):
        return f'<Status {self.name}>'


class ClientRequest(db.Model):
    __tablename__ = 'client_request'
    id = db.Column(db.Integer, primary_key=True)
    request_date = db.Column(db.Date, nullable=False, default=date.today)
    description = db.Column(db.Text, nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    pet_id = db.Column(db.Integer, db.ForeignKey('client_pet.id'), nullable=False)
    status_id = db.Column(db.Integer, db.ForeignKey('status.id'), nullable=False)
    services = db.relationship('ClinicService', secondary=services_request, lazy='subquery',
                               order_by='ClinicService.id',
                               backref=db.backref('requests', lazy=True))
    appointment = db.relationship('Appointment', backref='request', uselist=False, lazy=True)

    def __repr__(self):
        return f'<ClientRequest {self.id} by User {self.user_id}>'
