from dorothy.extensions import db
from dorothy.utils.tags import encode_tags


class CrudRepository:
    """Shared single-table operations. Subclasses set ``model``.

    Columns listed in ``list_fields`` hold JSON-encoded lists; values written
    through this class are encoded here and decoded by the model's ``to_dict``.
    """

    model = None
    list_fields = ()

    @classmethod
    def _prepare(cls, attrs):
        attrs = dict(attrs)
        for field in cls.list_fields:
            if field in attrs:
                attrs[field] = encode_tags(attrs[field])
        return attrs

    @classmethod
    def get(cls, record_id):
        return db.session.get(cls.model, record_id)

    @classmethod
    def count(cls, *criteria):
        return cls.model.query.filter(*criteria).count()

    @classmethod
    def create(cls, attrs):
        record = cls.model(**cls._prepare(attrs))
        db.session.add(record)
        db.session.commit()
        return record

    @classmethod
    def update(cls, record, attrs):
        for key, value in cls._prepare(attrs).items():
            if hasattr(record, key):
                setattr(record, key, value)
        db.session.commit()
        return record

    @classmethod
    def delete(cls, record):
        db.session.delete(record)
        db.session.commit()
