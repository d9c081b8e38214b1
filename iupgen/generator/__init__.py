"""IUP element binding generator."""

from .catalog import CatalogError as CatalogError
from .catalog import ValidationError as ValidationError
from .catalog import load as load
from .catalog import load_file as load_file
from .catalog import merge_attributes as merge_attributes
from .catalog import resolve_parent_attributes as resolve_parent_attributes
from .dispatch import DispatchError as DispatchError
from .dispatch import Rule as Rule
from .dispatch import classify as classify
from .types import *
