from vetclinic import db


class Appointment(db.Model):
    __tablename__ = 'appointment'
    id = db.Column(db.Integer, primary_key=True)
    visit_date = db.Column(db.Date, nullable=False)
    visit_time = db.Column(db.Time, nullable=False)
    doctor_id = db.Column(db.Integer, db.ForeignKey('doctor.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    client_request_id = db.Column(db.Integer, db.ForeignKey('client_request.id'), unique=True, nullable=False)

    def __repr__(self):
        return f'<Appointment {self.id} for Request {self.client_request_id}>'
