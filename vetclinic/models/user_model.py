import enum
from vetclinic import db


class Role(enum.Enum):
    USER = 'USER'
    DOCTOR = 'DOCTOR'
    MANAGER = 'MANAGER'
    ADMIN = 'ADMIN'


class User(db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    fio = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(32), unique=True, nullable=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    role = db.Column(db.Enum(Role), nullable=False, default=Role.USER)
    pets = db.relationship('ClientPet', backref='owner', lazy=True)
    requests = db.relationship('ClientRequest', backref='client', lazy=True)
    appointments = db.relationship('Appointment', backref='client', lazy=True)
    doctor = db.relationship('Doctor', backref='user', uselist=False, lazy=True)

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'
