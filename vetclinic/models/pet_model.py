import enum
from vetclinic import db


class PetSex(enum.Enum):
    MALE = 'M'
    FEMALE = 'F'


class ClientPet(db.Model):
    __tablename__ = 'client_pet'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    breed = db.Column(db.String(100), nullable=False)
    image = db.Column(db.String(255), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    sex = db.Column(db.String(1), nullable=False)
    weight = db.Column(db.Float, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    medicine_cards = db.relationship('MedicineCard', backref='pet', lazy=True)
    requests = db.relationship('ClientRequest', backref='pet', lazy=True)

    def __repr__(self):
        return f'<ClientPet {self.name} ({self.breed})>'
