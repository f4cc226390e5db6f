import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldDescriptor(object):
    """Give each chunk instance its own copy of a field declared on the class."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self.field

        data = instance.__dict__

        if self.field.name not in data:
            data[self.field.name] = self.field.create(father=instance)

        return data[self.field.name]

    def __set__(self, instance, value):
        # a whole new field replaces the old one, anything else is a value for it
        if isinstance(value, self.field.__class__):
            value.father = instance
            value.name = self.field.name
            instance.__dict__[self.field.name] = value
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls.__dict__:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        setattr(cls, name, FieldDescriptor(self, name))

        if name not in cls._meta.fields:
            cls._meta.fields.append(name)

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the chunk: for now the ordered names of its fields"""

    def __init__(self, fields=None):
        self.fields = list(fields) if fields else []


class MetaChunk(type):
    '''Collect the fields declared in the body of a Chunk (and of its parents)
    keeping the order of declaration, that is the order on the wire.'''

    logger = logging.getLogger(__name__)

    def __new__(mcs, name, bases, attrs):
        declared = [(key, value) for key, value in attrs.items() if isinstance(value, FieldBase)]
        for key, _ in declared:
            del attrs[key]

        new_cls = super().__new__(mcs, name, bases, attrs)

        inherited = []
        for parent in bases:
            if isinstance(parent, MetaChunk):
                inherited.extend(_ for _ in parent._meta.fields if _ not in inherited)

        new_cls._meta = Meta(inherited)

        for key, value in declared:
            mcs.logger.debug('contribute_to_chunk() for field \'%s.%s\'', name, key)
            value.contribute_to_chunk(new_cls, key)

        return new_cls
