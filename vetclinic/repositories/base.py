from vetclinic.utils.validation import MAX_INTEGER


class BaseRepository:
    """Data access for one model over an explicitly passed session.

    Repositories never commit: they add, flush and delete, and the calling
    service decides where the transaction ends.
    """

    model = None

    def __init__(self, session):
        self.session = session

    def query(self):
        return self.session.query(self.model)

    def get_by_id(self, entity_id):
        # Path ids are not range checked by the URL converter
        if entity_id > MAX_INTEGER:
            return None
        return self.session.get(self.model, entity_id)

    def list_all(self):
        return self.query().order_by(self.model.id).all()

    def find_one_by(self, **filters):
        return self.query().filter_by(**filters).first()

    def exists_other(self, entity_id, **filters):
        """True when a row other than ``entity_id`` already holds the given values."""
        query = self.query().filter_by(**filters)
        if entity_id is not None:
            query = query.filter(self.model.id != entity_id)
        return query.first() is not None

    def add(self, entity):
        self.session.add(entity)
        self.session.flush()
        return entity

    def delete(self, entity):
        self.session.delete(entity)
        self.session.flush()
