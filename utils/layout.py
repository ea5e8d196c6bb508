"""
Layout descriptors for ExprQuartiles
Plain data describing panels, independent of the UI layer that draws them
"""
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union


def namespace(module_id: str) -> Callable[[str], str]:
    """Return a function prefixing widget ids with the module id"""
    def ns(name: str) -> str:
        return f"{module_id}-{name}"
    return ns


@dataclass
class InputField:
    """A single input widget"""
    kind: str  # 'radio', 'number', 'select', 'multiselect', 'download'
    id: str
    label: str
    options: List[Any] = field(default_factory=list)
    value: Any = None
    min_value: Optional[float] = None
    step: Optional[float] = None
    help: Optional[str] = None
    format_func: Callable[[Any], str] = str

    # Options that depend on the value of another field
    depends_on: Optional[str] = None
    options_for: Optional[Callable[[Any], List[Any]]] = None

    def resolve_options(self, values: dict) -> List[Any]:
        """Options given the values of the fields rendered so far"""
        if self.options_for is not None:
            return list(self.options_for(values.get(self.depends_on)))
        return list(self.options)


@dataclass
class FieldSet:
    """A titled group of inputs"""
    id: str
    title: str
    fields: List[InputField] = field(default_factory=list)


@dataclass
class HelpModal:
    """Help trigger plus the panel it opens"""
    id: str
    trigger_label: str
    title: str
    content: str


@dataclass
class Heading:
    text: str
    level: int = 3


@dataclass
class Placeholder:
    """Region whose content is decided at render time"""
    id: str


Element = Union[InputField, FieldSet, HelpModal, Heading, Placeholder]


@dataclass
class Panel:
    """Ordered list of layout elements"""
    id: str
    elements: List[Element] = field(default_factory=list)

    def find(self, element_id: str) -> Optional[Element]:
        """Look up an element (including fields nested in field sets) by id"""
        for element in self.elements:
            if getattr(element, 'id', None) == element_id:
                return element
            if isinstance(element, FieldSet):
                for f in element.fields:
                    if f.id == element_id:
                        return f
        return None

    def fieldsets(self) -> List[FieldSet]:
        return [e for e in self.elements if isinstance(e, FieldSet)]

    def naked_fields(self) -> List[InputField]:
        """Inputs not wrapped in a field set"""
        return [e for e in self.elements if isinstance(e, InputField)]
