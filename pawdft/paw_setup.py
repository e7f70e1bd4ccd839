"""PAW atomic setups: data model, validation and XML loading."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "PAWSetupError",
    "XmlAttributeMap",
    "RadialFunction",
    "PAWState",
    "PAWChannel",
    "PAWSetup",
    "PAWSetupRegistry",
    "parse_paw_setup",
    "load_paw_setup_xml",
]

_UNSTRUCTURED_TAGS = frozenset(
    {
        "valence_states",
        "radial_grid",
        "ae_partial_wave",
        "pseudo_partial_wave",
        "projector_function",
        "ae_core_density",
        "pseudo_core_density",
        "ae_core_kinetic_energy_density",
        "pseudo_core_kinetic_energy_density",
        "pseudo_valence_density",
        "zero_potential",
        "blochl_local_ionic_potential",
    }
)

_NAMED_RADIAL_TAGS = (
    "ae_core_density",
    "pseudo_core_density",
    "ae_core_kinetic_energy_density",
    "pseudo_core_kinetic_energy_density",
    "pseudo_valence_density",
    "zero_potential",
    "blochl_local_ionic_potential",
)

_PER_STATE_TAGS = ("ae_partial_wave", "pseudo_partial_wave", "projector_function")


class PAWSetupError(ValueError):
    """Raised when a PAW setup is malformed or inconsistent."""


@dataclass
class XmlAttributeMap:
    """The attributes of one XML element, kept as strings."""

    values: dict[str, str] = field(default_factory=dict)

    def has(self, key: str) -> bool:
        return key in self.values

    def get_string(self, key: str) -> str:
        try:
            return self.values[key]
        except KeyError:
            raise KeyError(f"Missing XML attribute key: {key}") from None

    def get_double(self, key: str) -> float:
        return float(self.get_string(key))


@dataclass
class RadialFunction:
    """A function sampled on a radial grid."""

    radii: list[float] = field(default_factory=list)
    values: list[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def is_empty(self) -> bool:
        return not self.radii or not self.values

    def validate(self, name: str) -> None:
        if len(self.radii) != len(self.values):
            raise PAWSetupError(f"{name}: radial grid and values size mismatch")
        if not self.radii:
            raise PAWSetupError(f"{name}: radial function is empty")


@dataclass
class PAWState:
    """One valence state of a PAW dataset."""

    id: str = ""
    n: int = -1
    l: int = 0
    has_n: bool = False
    occupation: float = 0.0
    cutoff_radius: float = 0.0
    energy: float = 0.0
    attributes: XmlAttributeMap = field(default_factory=XmlAttributeMap)


@dataclass
class PAWChannel:
    """All states, projectors and partial waves sharing one angular momentum."""

    l: int = 0
    state_ids: list[str] = field(default_factory=list)
    projectors: list[RadialFunction] = field(default_factory=list)
    all_electron_partial_waves: list[RadialFunction] = field(default_factory=list)
    pseudo_partial_waves: list[RadialFunction] = field(default_factory=list)

    def num_projectors(self) -> int:
        return len(self.projectors)

    def validate(self, setup_name: str) -> None:
        if not self.projectors:
            raise PAWSetupError(f"{setup_name}: PAW channel has no projectors")
        if len(self.projectors) != len(self.all_electron_partial_waves) or len(self.projectors) != len(
            self.pseudo_partial_waves
        ):
            raise PAWSetupError(f"{setup_name}: inconsistent projector/partial-wave counts")
        for index, (projector, ae_wave, pseudo_wave) in enumerate(
            zip(self.projectors, self.all_electron_partial_waves, self.pseudo_partial_waves)
        ):
            projector.validate(f"{setup_name}: projector[{index}]")
            ae_wave.validate(f"{setup_name}: all-electron partial wave[{index}]")
            pseudo_wave.validate(f"{setup_name}: pseudo partial wave[{index}]")


@dataclass
class PAWSetup:
    """A complete PAW dataset for one element."""

    symbol: str = ""
    valence_charge: float = 0.0
    cutoff_radius: float = 0.0
    atomic_number: float = 0.0
    local_potential: RadialFunction = field(default_factory=RadialFunction)
    core_density: RadialFunction = field(default_factory=RadialFunction)
    metadata_blocks: dict[str, XmlAttributeMap] = field(default_factory=dict)
    radial_grids: dict[str, list[float]] = field(default_factory=dict)
    named_radial_functions: dict[str, RadialFunction] = field(default_factory=dict)
    states: list[PAWState] = field(default_factory=list)
    all_electron_partial_waves_by_state: list[RadialFunction] = field(default_factory=list)
    pseudo_partial_waves_by_state: list[RadialFunction] = field(default_factory=list)
    projectors_by_state: list[RadialFunction] = field(default_factory=list)
    kinetic_difference_values: list[float] = field(default_factory=list)
    channels: list[PAWChannel] = field(default_factory=list)

    def num_channels(self) -> int:
        return len(self.channels)

    def num_projectors(self) -> int:
        return sum(channel.num_projectors() for channel in self.channels)

    def validate(self) -> None:
        if not self.symbol:
            raise PAWSetupError("PAW setup symbol is empty")
        if self.atomic_number <= 0.0:
            raise PAWSetupError(f"{self.symbol}: atomic number must be positive")
        if self.valence_charge <= 0.0:
            raise PAWSetupError(f"{self.symbol}: valence charge must be positive")
        if self.cutoff_radius <= 0.0:
            raise PAWSetupError(f"{self.symbol}: cutoff radius must be positive")

        self.local_potential.validate(f"{self.symbol}: local potential")
        self.core_density.validate(f"{self.symbol}: core density")

        if not self.channels:
            raise PAWSetupError(f"{self.symbol}: no PAW channels defined")
        if not self.states:
            raise PAWSetupError(f"{self.symbol}: no PAW valence states defined")

        state_count = len(self.states)
        if (
            len(self.all_electron_partial_waves_by_state) != state_count
            or len(self.pseudo_partial_waves_by_state) != state_count
            or len(self.projectors_by_state) != state_count
        ):
            raise PAWSetupError(f"{self.symbol}: state-resolved PAW radial data is incomplete")
        if len(self.kinetic_difference_values) != state_count * state_count:
            raise PAWSetupError(f"{self.symbol}: kinetic-difference values must match the number of states")

        for channel in self.channels:
            channel.validate(self.symbol)


class PAWSetupRegistry:
    """Validated PAW setups keyed by chemical symbol."""

    def __init__(self) -> None:
        self._setups: dict[str, PAWSetup] = {}

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._setups

    def __len__(self) -> int:
        return len(self._setups)

    def add(self, setup: PAWSetup) -> None:
        setup.validate()
        self._setups[setup.symbol] = setup

    def has(self, symbol: str) -> bool:
        return symbol in self._setups

    def get(self, symbol: str) -> PAWSetup:
        try:
            return self._setups[symbol]
        except KeyError:
            raise KeyError(f"No PAW setup registered for symbol: {symbol}") from None


def _parse_doubles(text: str) -> list[float]:
    values: list[float] = []
    for token in text.split():
        try:
            values.append(float(token))
        except ValueError:
            break
    return values


def _require_child(parent: ET.Element, name: str) -> ET.Element:
    child = parent.find(name)
    if child is None:
        raise PAWSetupError(f"Missing XML element: {name}")
    return child


def _read_text(element: ET.Element, name: str) -> str:
    if element.text is None:
        raise PAWSetupError(f"Missing text for XML element: {name}")
    return element.text


def _read_string_attribute(element: ET.Element, attribute_name: str) -> str:
    value = element.get(attribute_name)
    if value is None:
        raise PAWSetupError(f"Missing XML attribute: {attribute_name}")
    return value


def _read_int_attribute(element: ET.Element, attribute_name: str) -> int:
    try:
        return int(element.get(attribute_name, ""))
    except ValueError:
        raise PAWSetupError(f"Failed to read integer XML attribute: {attribute_name}") from None


def _read_double_attribute(element: ET.Element, attribute_name: str) -> float:
    try:
        return float(element.get(attribute_name, ""))
    except ValueError:
        raise PAWSetupError(f"Failed to read double XML attribute: {attribute_name}") from None


def _read_attributes(element: ET.Element) -> XmlAttributeMap:
    return XmlAttributeMap(dict(element.attrib))


def _resolve_grid(element: ET.Element, radial_grids: dict[str, list[float]]) -> list[float]:
    grid_id = _read_string_attribute(element, "grid")
    try:
        return radial_grids[grid_id]
    except KeyError:
        raise PAWSetupError(f"Unknown radial_grid id referenced by XML element: {grid_id}") from None


def _load_radial_function(
    element: ET.Element, radial_grids: dict[str, list[float]], name: str
) -> RadialFunction:
    radial_function = RadialFunction(
        radii=list(_resolve_grid(element, radial_grids)),
        values=_parse_doubles(_read_text(element, name)),
    )
    radial_function.validate(name)
    return radial_function


def _read_state(element: ET.Element) -> PAWState:
    attributes = _read_attributes(element)
    state = PAWState(
        id=_read_string_attribute(element, "id"),
        l=_read_int_attribute(element, "l"),
        attributes=attributes,
        has_n=attributes.has("n"),
    )
    if state.has_n:
        state.n = int(attributes.get_string("n"))
    if attributes.has("f"):
        state.occupation = attributes.get_double("f")
    if attributes.has("rc"):
        state.cutoff_radius = attributes.get_double("rc")
    if attributes.has("e"):
        state.energy = attributes.get_double("e")
    return state


def _build_setup(dataset: ET.Element) -> PAWSetup:
    if dataset.tag != "paw_dataset":
        raise PAWSetupError("Unsupported PAW XML root element")

    atom = _require_child(dataset, "atom")
    paw_radius = _require_child(dataset, "paw_radius")
    pseudo_core_density = _require_child(dataset, "pseudo_core_density")
    zero_potential = _require_child(dataset, "zero_potential")
    valence_states = _require_child(dataset, "valence_states")
    kinetic_energy_differences = _require_child(dataset, "kinetic_energy_differences")

    setup = PAWSetup(
        symbol=_read_string_attribute(atom, "symbol"),
        valence_charge=_read_double_attribute(atom, "valence"),
        cutoff_radius=_read_double_attribute(paw_radius, "rc"),
        atomic_number=_read_double_attribute(atom, "Z"),
    )

    for child in dataset:
        if child.tag not in _UNSTRUCTURED_TAGS:
            setup.metadata_blocks[child.tag] = _read_attributes(child)

    radial_grids: dict[str, list[float]] = {}
    for radial_grid in dataset.findall("radial_grid"):
        grid_id = _read_string_attribute(radial_grid, "id")
        values_element = _require_child(radial_grid, "values")
        grid_values = _parse_doubles(_read_text(values_element, "radial_grid/values"))
        if not grid_values:
            raise PAWSetupError(f"PAW XML radial grid is empty for id: {grid_id}")
        radial_grids.setdefault(grid_id, grid_values)
    if not radial_grids:
        raise PAWSetupError("PAW XML does not contain any radial_grid definitions")
    setup.radial_grids = radial_grids

    setup.core_density = _load_radial_function(pseudo_core_density, radial_grids, "pseudo_core_density")
    setup.local_potential = _load_radial_function(zero_potential, radial_grids, "zero_potential")
    setup.named_radial_functions["pseudo_core_density"] = setup.core_density
    setup.named_radial_functions["zero_potential"] = setup.local_potential

    for tag_name in _NAMED_RADIAL_TAGS:
        element = dataset.find(tag_name)
        if element is not None:
            setup.named_radial_functions[tag_name] = _load_radial_function(element, radial_grids, tag_name)

    state_to_channel: dict[str, int] = {}
    state_to_index: dict[str, int] = {}
    l_to_channel: dict[int, int] = {}

    for state_element in valence_states.findall("state"):
        state = _read_state(state_element)
        setup.states.append(state)
        state_to_index.setdefault(state.id, len(setup.states) - 1)

        if state.l not in l_to_channel:
            l_to_channel[state.l] = len(setup.channels)
            setup.channels.append(PAWChannel(l=state.l))
        channel_index = l_to_channel[state.l]
        state_to_channel.setdefault(state.id, channel_index)
        setup.channels[channel_index].state_ids.append(state.id)

    state_count = len(setup.states)
    setup.all_electron_partial_waves_by_state = [RadialFunction() for _ in range(state_count)]
    setup.pseudo_partial_waves_by_state = [RadialFunction() for _ in range(state_count)]
    setup.projectors_by_state = [RadialFunction() for _ in range(state_count)]

    for tag_name in _PER_STATE_TAGS:
        for element in dataset.findall(tag_name):
            state_id = _read_string_attribute(element, "state")
            if state_id not in state_to_channel:
                raise PAWSetupError(f"PAW XML references unknown state id: {state_id}")
            state_index = state_to_index[state_id]
            channel = setup.channels[state_to_channel[state_id]]
            radial_function = _load_radial_function(element, radial_grids, tag_name)

            if tag_name == "ae_partial_wave":
                channel.all_electron_partial_waves.append(radial_function)
                setup.all_electron_partial_waves_by_state[state_index] = radial_function
            elif tag_name == "pseudo_partial_wave":
                channel.pseudo_partial_waves.append(radial_function)
                setup.pseudo_partial_waves_by_state[state_index] = radial_function
            else:
                channel.projectors.append(radial_function)
                setup.projectors_by_state[state_index] = radial_function

    setup.kinetic_difference_values = _parse_doubles(
        _read_text(kinetic_energy_differences, "kinetic_energy_differences")
    )

    setup.validate()
    return setup


def parse_paw_setup(text: str) -> PAWSetup:
    """Parse a PAW dataset from XML text and validate it."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as error:
        raise PAWSetupError(f"Failed to parse PAW XML: {error}") from error
    return _build_setup(root)


def load_paw_setup_xml(filename: str | Path) -> PAWSetup:
    """Load and validate a PAW dataset from an XML file."""
    try:
        root = ET.parse(filename).getroot()
    except (OSError, ET.ParseError) as error:
        raise PAWSetupError(f"Failed to load PAW XML file: {filename}") from error
    return _build_setup(root)