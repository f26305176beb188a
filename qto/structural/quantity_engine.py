"""
Quantity Computation Engine
Calculates concrete volumes, formwork areas and steel weights for placed
structural element instances (beams, columns, slabs, foundations).

Dimensions come from the instance's custom geometry, then the template
properties, then type defaults. Beam lengths and slab areas may also be
derived from grid references such as ["A-C", "1"] or ["A-C", "1-3"].
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import InvalidDimension, ReferenceNotFound
from ..geometry.grid import GridIndex
from ..models.project import Axis, BarSpec, ElementInstance, ElementTemplate, ElementType
from ..models.takeoff import TakeoffLine, TakeoffLineBuilder, format_number, round_half_up
from ..settings import EngineSettings
from .concrete import (
    ConcreteOutput,
    beam_concrete,
    column_concrete,
    footing_concrete,
    slab_concrete,
)
from .formwork import (
    FormworkOutput,
    beam_formwork,
    circular_column_formwork,
    footing_formwork,
    rectangular_column_formwork,
    slab_formwork,
)
from .rebar import (
    RebarOutput,
    dpwh_rebar_item,
    lateral_ties,
    longitudinal_bars,
    rebar_grade,
    spaced_bars,
)

logger = logging.getLogger(__name__)


@dataclass
class StructuralSummary:
    """Run totals for structural elements."""
    total_concrete: float = 0.0
    total_rebar: float = 0.0
    total_formwork: float = 0.0
    element_count: int = 0
    beam_count: int = 0
    column_count: int = 0
    slab_count: int = 0
    foundation_count: int = 0

    def count(self, element_type: ElementType) -> None:
        self.element_count += 1
        attr = f"{element_type.value}_count"
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalConcrete': round_half_up(self.total_concrete, 3),
            'totalRebar': round_half_up(self.total_rebar, 2),
            'totalFormwork': round_half_up(self.total_formwork, 2),
            'elementCount': self.element_count,
            'beamCount': self.beam_count,
            'columnCount': self.column_count,
            'slabCount': self.slab_count,
            'foundationCount': self.foundation_count,
        }


@dataclass
class StructuralResult:
    takeoff_lines: List[TakeoffLine] = field(default_factory=list)
    summary: StructuralSummary = field(default_factory=StructuralSummary)


class QuantityEngine:
    """
    Computes structural quantities per element instance.

    Each instance yields one concrete line, one formwork line and one line per
    configured rebar set (main bars, stirrups/ties, secondary bars).
    """

    DEFAULT_DIMENSIONS = {
        ElementType.BEAM: {'width': 0.3, 'height': 0.5},
        ElementType.COLUMN: {'width': 0.3, 'depth': 0.3, 'diameter': 0.4, 'height': 3.0},
        ElementType.SLAB: {'thickness': 0.1},
        ElementType.FOUNDATION: {'length': 1.5, 'width': 1.5, 'depth': 0.5},
    }

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()

    def calculate(
        self,
        instances: Sequence[ElementInstance],
        templates: Sequence[ElementTemplate],
        index: GridIndex,
    ) -> StructuralResult:
        """
        Compute quantities for every element instance.

        Raises:
            ReferenceNotFound: instance references a missing template
            LevelNotFound / GridLineNotFound: unresolved placement
            InvalidDimension: non-positive or undeterminable dimension
        """
        templates_by_id = {t.id: t for t in templates}
        result = StructuralResult()

        handlers = {
            ElementType.BEAM: self._beam,
            ElementType.COLUMN: self._column,
            ElementType.SLAB: self._slab,
            ElementType.FOUNDATION: self._foundation,
        }

        for instance in instances:
            template = templates_by_id.get(instance.template_id)
            if template is None:
                raise ReferenceNotFound("ElementTemplate", instance.template_id, instance.id)
            index.elevation(instance.level_id)

            lines = handlers[template.type](instance, template, index)
            for line in lines:
                self._accumulate(result.summary, line)
            result.takeoff_lines.extend(lines)
            result.summary.count(template.type)
            logger.debug(f"{template.type.value} {instance.id}: {len(lines)} lines")

        s = result.summary
        logger.info(
            f"Structural: {s.element_count} elements, concrete {s.total_concrete:.3f} m³, "
            f"rebar {s.total_rebar:.2f} kg, formwork {s.total_formwork:.2f} m²"
        )
        return result

    # -------------------------------------------------------------------------
    # Dimensions
    # -------------------------------------------------------------------------

    def _dim(self, instance: ElementInstance, template: ElementTemplate, name: str) -> float:
        default = self.DEFAULT_DIMENSIONS.get(template.type, {}).get(name)
        return float(instance.dimension(template, name, default))

    @staticmethod
    def _split_span(ref: str) -> Optional[Tuple[str, str]]:
        if "-" not in ref:
            return None
        start, end = ref.split("-", 1)
        return start.strip(), end.strip()

    def beam_length(self, instance: ElementInstance, template: ElementTemplate, index: GridIndex) -> float:
        """
        Explicit length, else the grid span of the reference.

        ["A-C", "1"] spans A..C on gridX; ["A", "1-3"] spans 1..3 on gridY.
        """
        length = instance.dimension(template, 'length')
        if length is not None:
            return float(length)

        ref = instance.grid_ref or []
        if len(ref) >= 2:
            x_span, y_span = self._split_span(ref[0]), self._split_span(ref[1])
            if x_span:
                index.offset(Axis.Y, ref[1])
                x1, x2 = index.offsets(Axis.X, x_span)
                return abs(x2 - x1)
            if y_span:
                index.offset(Axis.X, ref[0])
                y1, y2 = index.offsets(Axis.Y, y_span)
                return abs(y2 - y1)

        raise InvalidDimension(
            'length', None,
            f"cannot determine length of beam {instance.id} (template {template.name}); "
            f"grid ref {ref or 'none'}, expected a length property or a grid ref like ['A-C', '1']",
        )

    def slab_area(self, instance: ElementInstance, template: ElementTemplate, index: GridIndex) -> float:
        """Explicit area, else the rectangle of a ["A-C", "1-3"] grid reference."""
        area = instance.dimension(template, 'area')
        if area is not None:
            return float(area)

        ref = instance.grid_ref or []
        if len(ref) >= 2:
            x_span, y_span = self._split_span(ref[0]), self._split_span(ref[1])
            if x_span and y_span:
                x1, x2 = index.offsets(Axis.X, x_span)
                y1, y2 = index.offsets(Axis.Y, y_span)
                return abs(x2 - x1) * abs(y2 - y1)

        raise InvalidDimension(
            'area', None,
            f"cannot determine area of slab {instance.id} (template {template.name}); "
            f"grid ref {ref or 'none'}, expected format ['A-C', '1-3']",
        )

    def column_height(self, instance: ElementInstance, template: ElementTemplate, index: GridIndex) -> float:
        if instance.end_level_id:
            return abs(index.elevation(instance.end_level_id) - index.elevation(instance.level_id))
        return self._dim(instance, template, 'height')

    # -------------------------------------------------------------------------
    # Element handlers
    # -------------------------------------------------------------------------

    def _beam(self, instance, template, index) -> List[TakeoffLine]:
        width = self._dim(instance, template, 'width')
        height = self._dim(instance, template, 'height')
        length = self.beam_length(instance, template, index)
        tags = self._tags(instance, template)

        lines = [
            self._concrete_line(instance, template, tags,
                                beam_concrete(width, height, length, self.settings.waste_for('concrete'))),
            self._formwork_line(instance, template, tags, beam_formwork(width, height, length)),
        ]

        rebar = template.rebar_config
        if rebar is not None:
            if rebar.main_bars and rebar.main_bars.count:
                lines.append(self._rebar_line(
                    instance, tags, 'main', rebar.main_bars,
                    longitudinal_bars(rebar.main_bars.diameter, rebar.main_bars.count, length,
                                      self.settings.waste_for('rebar'), self.settings.lap_multiplier),
                    manual_item=rebar.dpwh_rebar_item, epoxy=rebar.epoxy_coated,
                ))
            if rebar.stirrups and rebar.stirrups.spacing:
                lines.append(self._rebar_line(
                    instance, tags, 'stirrups', rebar.stirrups,
                    lateral_ties(rebar.stirrups.diameter, rebar.stirrups.spacing, length, width, height,
                                 self.settings.waste_for('rebar'), self.settings.hook_allowance_m),
                    epoxy=rebar.epoxy_coated,
                ))
        return lines

    def _column(self, instance, template, index) -> List[TakeoffLine]:
        shape = str(instance.dimension(template, 'shape', 'rectangular'))
        height = self.column_height(instance, template, index)
        tags = self._tags(instance, template) + [f"shape:{shape}"]
        waste = self.settings.waste_for('concrete')

        if shape == 'circular':
            diameter = self._dim(instance, template, 'diameter')
            concrete = column_concrete(height, waste, shape='circular', diameter=diameter)
            formwork = circular_column_formwork(diameter, height)
            section = (diameter, diameter)
        else:
            width = self._dim(instance, template, 'width')
            depth = self._dim(instance, template, 'depth')
            concrete = column_concrete(height, waste, width=width, depth=depth)
            formwork = rectangular_column_formwork(width, depth, height)
            section = (width, depth)

        lines = [
            self._concrete_line(instance, template, tags, concrete),
            self._formwork_line(instance, template, tags, formwork),
        ]

        rebar = template.rebar_config
        if rebar is not None:
            if rebar.main_bars and rebar.main_bars.count:
                lines.append(self._rebar_line(
                    instance, tags, 'main', rebar.main_bars,
                    longitudinal_bars(rebar.main_bars.diameter, rebar.main_bars.count, height,
                                      self.settings.waste_for('rebar'), self.settings.lap_multiplier),
                    manual_item=rebar.dpwh_rebar_item, epoxy=rebar.epoxy_coated,
                ))
            if rebar.stirrups and rebar.stirrups.spacing:
                lines.append(self._rebar_line(
                    instance, tags, 'ties', rebar.stirrups,
                    lateral_ties(rebar.stirrups.diameter, rebar.stirrups.spacing, height, *section,
                                 waste=self.settings.waste_for('rebar'),
                                 hook_allowance_m=self.settings.hook_allowance_m),
                    epoxy=rebar.epoxy_coated,
                ))
        return lines

    def _slab(self, instance, template, index) -> List[TakeoffLine]:
        thickness = self._dim(instance, template, 'thickness')
        area = self.slab_area(instance, template, index)
        tags = self._tags(instance, template)

        lines = [
            self._concrete_line(instance, template, tags,
                                slab_concrete(thickness, area, self.settings.waste_for('concrete'))),
            self._formwork_line(instance, template, tags, slab_formwork(area)),
        ]

        rebar = template.rebar_config
        if rebar is not None:
            # square slab assumption: side = sqrt(area)
            side = math.sqrt(area)
            for role, spec in (('main', rebar.main_bars), ('secondary', rebar.secondary_bars)):
                if spec and spec.spacing:
                    lines.append(self._rebar_line(
                        instance, tags, role, spec,
                        spaced_bars(spec.diameter, spec.spacing, side, side, 1,
                                    self.settings.waste_for('rebar'), self.settings.lap_multiplier),
                        manual_item=rebar.dpwh_rebar_item if role == 'main' else None,
                        epoxy=rebar.epoxy_coated,
                        extra=[f"Square slab assumption: side = √{area:.3f} = {side:.3f}m"],
                    ))
        return lines

    def _foundation(self, instance, template, index) -> List[TakeoffLine]:
        length = self._dim(instance, template, 'length')
        width = self._dim(instance, template, 'width')
        depth = self._dim(instance, template, 'depth')
        tags = self._tags(instance, template)

        lines = [
            self._concrete_line(instance, template, tags,
                                footing_concrete(length, width, depth, self.settings.waste_for('concrete'))),
            self._formwork_line(instance, template, tags, footing_formwork(length, width, depth)),
        ]

        rebar = template.rebar_config
        if rebar is not None and rebar.main_bars and rebar.main_bars.spacing:
            waste = self.settings.waste_for('rebar')
            cross = rebar.secondary_bars if rebar.secondary_bars and rebar.secondary_bars.spacing \
                else rebar.main_bars
            # bars along the length are spread across the width, and vice versa
            lines.append(self._rebar_line(
                instance, tags, 'main', rebar.main_bars,
                spaced_bars(rebar.main_bars.diameter, rebar.main_bars.spacing, length, width, 1,
                            waste, self.settings.lap_multiplier),
                manual_item=rebar.dpwh_rebar_item, epoxy=rebar.epoxy_coated,
            ))
            lines.append(self._rebar_line(
                instance, tags, 'secondary', cross,
                spaced_bars(cross.diameter, cross.spacing, width, length, 1,
                            waste, self.settings.lap_multiplier),
                epoxy=rebar.epoxy_coated,
            ))
        return lines

    # -------------------------------------------------------------------------
    # Line assembly
    # -------------------------------------------------------------------------

    @staticmethod
    def _tags(instance: ElementInstance, template: ElementTemplate) -> List[str]:
        return [
            f"type:{template.type.value}",
            f"level:{instance.level_id}",
            f"template:{template.id}",
            *instance.tags,
        ]

    @staticmethod
    def _waste_text(waste: float) -> str:
        return f"Waste: {waste * 100:.0f}%"

    def _concrete_line(self, instance, template, tags, output: ConcreteOutput) -> TakeoffLine:
        places = self.settings.places('concrete')
        waste = output.inputs['waste']
        dpwh_item = template.dpwh_item_number or self.settings.dpwh_items.get('concrete', '')

        builder = TakeoffLineBuilder(
            source_element_id=instance.id,
            trade='Concrete',
            resource_key=template.dpwh_item_number or 'concrete-class-a',
            unit='m³',
        )
        builder.inputs(**output.inputs)
        builder.assume('waste', self._waste_text(waste), waste)
        builder.tag(*tags, f"dpwh:{dpwh_item}")
        return builder.build(round_half_up(output.volume_with_waste, places), output.formula_text)

    def _formwork_line(self, instance, template, tags, output: FormworkOutput) -> TakeoffLine:
        places = self.settings.places('formwork')
        waste = self.settings.waste_for('formwork')
        with_waste = output.area * (1 + waste)

        builder = TakeoffLineBuilder(
            source_element_id=instance.id,
            trade='Formwork',
            resource_key=f"formwork-{template.type.value}",
            unit='m²',
        )
        builder.inputs(**output.inputs, waste=waste)
        builder.assume('waste', self._waste_text(waste), waste)
        builder.tag(*tags, f"dpwh:{self.settings.dpwh_items.get('formwork', '')}")
        formula = (
            f"{output.formula_text} × (1 + {waste * 100:.0f}% waste) = {with_waste:.{places}f} m²"
        )
        return builder.build(round_half_up(with_waste, places), formula)

    def _rebar_line(self, instance, tags, role: str, spec: BarSpec, output: RebarOutput,
                    manual_item: Optional[str] = None, epoxy: bool = False,
                    extra: Sequence[str] = ()) -> TakeoffLine:
        places = self.settings.places('rebar')
        grade = rebar_grade(spec.diameter)
        dpwh_item = manual_item or dpwh_rebar_item(spec.diameter, epoxy)
        waste = output.inputs['waste']

        builder = TakeoffLineBuilder(
            source_element_id=instance.id,
            trade='Rebar',
            resource_key=f"rebar-{spec.diameter}mm-grade{grade}-{role}",
            unit='kg',
        )
        builder.inputs(**output.inputs)
        builder.assume('waste', self._waste_text(waste), waste)
        builder.assume('dpwhItem', f"DPWH Item: {dpwh_item}", dpwh_item)
        builder.assume('grade', f"Grade {grade}", grade)
        if spec.spacing:
            builder.assume('spacing', f"Spacing: {format_number(spec.spacing)}m", spec.spacing)
        for text in extra:
            builder.assume('note', text)
        builder.tag(*tags, f"rebar:{role}", f"diameter:{spec.diameter}mm", f"dpwh:{dpwh_item}")
        return builder.build(round_half_up(output.weight, places), output.formula_text)

    @staticmethod
    def _accumulate(summary: StructuralSummary, line: TakeoffLine) -> None:
        if line.trade == 'Concrete':
            summary.total_concrete += line.quantity
        elif line.trade == 'Rebar':
            summary.total_rebar += line.quantity
        elif line.trade == 'Formwork':
            summary.total_formwork += line.quantity
