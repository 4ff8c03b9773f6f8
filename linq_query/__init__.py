# Package initializer: export the pipeline entry points and the fault kinds so callers can
# write `from linq_query import from_collection, LinqNoElementException`.

from .exceptions import LinqException, LinqNilInputException, LinqNilFuncException, LinqNoElementException, \
    LinqNegativeParamException, LinqUnsupportedTypeException
from . import exceptions
from . import ordering
from . import sets
from .common import Policy, Grouping
from .linq import Queryable, from_collection
