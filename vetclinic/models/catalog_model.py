from vetclinic import db


class ServicesCategory(db.Model):
    __tablename__ = 'services_categories'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    services = db.relationship('ClinicService', backref='category', lazy=True)

    def __repr__(self):
        return f'<ServicesCategory {self.name}>'


class ClinicService(db.Model):
    __tablename__ = 'services'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), unique=True, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category_id = db.Column(db.Integer, db.ForeignKey('services_categories.id'), nullable=False)

    def __repr__(self):
        return f'<ClinicService {self.name}>'
