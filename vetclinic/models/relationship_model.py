from vetclinic import db

# Association table for ClientRequest and ClinicService (M:N)
services_request = db.Table('services_request',
    db.Column('id', db.Integer, primary_key=True, autoincrement=True),
    db.Column('client_request_id', db.Integer, db.ForeignKey('client_request.id'), nullable=False),
    db.Column('service_id', db.Integer, db.ForeignKey('services.id'), nullable=False),
    db.UniqueConstraint('client_request_id', 'service_id', name='uq_services_request_pair')
)
