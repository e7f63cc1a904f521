import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldDescriptor(object):
    """Wrapper around field access of a Field related class."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self.field

        data = instance.__dict__

        if self.field.name not in data:
            self.logger.debug("create new field for field named '%s'", self.field.name)
            data[self.field.name] = self.field.create(father=instance)

        return data[self.field.name]

    def __set__(self, instance, value):
        raise AttributeError(f"field '{self.field.name}' is filled only by unpacking")


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        setattr(cls, name, FieldDescriptor(self, name))
        cls._fields.append(name)

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class MetaChunk(type):
    '''Collects the fields of a chunk in declaration order.

    A field can start only after a field declared before it, this is
    checked here so that a layout that cannot be read front to back
    is refused when the class is created.'''

    def __new__(cls, name, bases, attrs):
        declared = [(_k, _v) for _k, _v in attrs.items() if isinstance(_v, FieldBase)]
        others = {_k: _v for _k, _v in attrs.items() if not isinstance(_v, FieldBase)}

        new_cls = super().__new__(cls, name, bases, others)
        new_cls._fields = []

        logger = logging.getLogger(__name__)

        for field_name, field in declared:
            previous = field.where.follows()
            if previous is not None and previous not in new_cls._fields:
                raise AttributeError(
                    f"field '{field_name}' of '{name}' follows '{previous}' that is not declared before it")

            logger.debug("field '%s' of '%s' follows '%s'", field_name, name, previous)
            field.contribute_to_chunk(new_cls, field_name)

        return new_cls
