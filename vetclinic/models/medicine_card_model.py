from vetclinic import db


class MedicineCard(db.Model):
    __tablename__ = 'medicine_card'
    id = db.Column(db.Integer, primary_key=True)
    reason = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    visit_date = db.Column(db.Date, nullable=False)
    pet_id = db.Column(db.Integer, db.ForeignKey('client_pet.id'), nullable=False)

    def __repr__(self):
        return f'<MedicineCard {self.id} for Pet {self.pet_id}>'
