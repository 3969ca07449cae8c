from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging

import numpy as np

from .lut3d import Lut3D, grid_coordinates, require_same_size
from .pipeline import PipelineInvertibilityError, PipelineModel, StagePipeline
from .srgb import to_display, to_linear


logger = logging.getLogger(__name__)


@dataclass
class DomainExcursions:
    """Grid sites where an intermediate value left its nominal [0, 1] range.

    These are expected under strong edits and never abort a run.
    """

    stage_below_black: int = 0
    display_out_of_range: int = 0
    linear_below_zero: int = 0
    output_out_of_range: int = 0

    def merge(self, other: "DomainExcursions") -> "DomainExcursions":
        return DomainExcursions(
            stage_below_black=self.stage_below_black + other.stage_below_black,
            display_out_of_range=self.display_out_of_range + other.display_out_of_range,
            linear_below_zero=self.linear_below_zero + other.linear_below_zero,
            output_out_of_range=self.output_out_of_range + other.output_out_of_range,
        )

    @property
    def total(self) -> int:
        return self.stage_below_black + self.display_out_of_range + self.linear_below_zero + self.output_out_of_range


@dataclass
class CorrectionResult:
    lut: Lut3D
    mode: str
    evaluated_points: int
    excursions: DomainExcursions = field(default_factory=DomainExcursions)


def _count_sites(mask: np.ndarray) -> int:
    return int(np.count_nonzero(np.any(mask, axis=-1)))


class LutCorrector:
    """Builds the in-engine LUT that reproduces an edit made on a screenshot.

    For each grid site ``p`` of the output LUT:

    1. ``x = f^-1(p)`` recovers the pre-pipeline color
    2. ``r = g_x(stage(p))`` is the render color shown in the screenshot
    3. ``e = to_linear(edit(to_display(r)))`` replays the user's edit on it
    4. ``g_x^-1(e)`` is stored, using the same ``x`` as step 2
    """

    def __init__(
        self,
        model: PipelineModel | None = None,
        max_workers: int = 1,
        verify_tolerance: float = 1e-4,
    ) -> None:
        self.model: PipelineModel = model if model is not None else StagePipeline()
        self.model.validate()
        self.max_workers = max(1, int(max_workers))
        self.verify_tolerance = float(verify_tolerance)

    def correct(self, lut_edit: Lut3D, lut_stage: Lut3D) -> CorrectionResult:
        require_same_size(lut_edit, lut_stage, what="edited and stage LUTs")

        size = lut_edit.size
        indices, points = grid_coordinates(size)
        logger.info(
            "correcting %dx%dx%d LUT with pipeline=%s workers=%d",
            size,
            size,
            size,
            self.model.name,
            self.max_workers,
        )

        if self.max_workers > 1:
            chunks = list(
                zip(
                    np.array_split(indices, self.max_workers),
                    np.array_split(points, self.max_workers),
                )
            )
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                parts = list(pool.map(lambda c: self._evaluate(lut_edit, lut_stage, c[0], c[1]), chunks))
        else:
            parts = [self._evaluate(lut_edit, lut_stage, indices, points)]

        table = np.zeros((size, size, size, 3), dtype=np.float64)
        excursions = DomainExcursions()
        evaluated = 0
        for chunk_indices, values, chunk_excursions in parts:
            table[chunk_indices[:, 0], chunk_indices[:, 1], chunk_indices[:, 2]] = values
            excursions = excursions.merge(chunk_excursions)
            evaluated += int(chunk_indices.shape[0])

        _log_excursions(excursions, evaluated)
        return CorrectionResult(
            lut=Lut3D(table=table, title=lut_stage.title or lut_edit.title),
            mode="corrected",
            evaluated_points=evaluated,
            excursions=excursions,
        )

    def passthrough(self, lut_edit: Lut3D) -> CorrectionResult:
        logger.info("raw mode: copying edited LUT without correction")
        return CorrectionResult(
            lut=lut_edit.with_table(lut_edit.table),
            mode="raw",
            evaluated_points=0,
        )

    def _evaluate(
        self,
        lut_edit: Lut3D,
        lut_stage: Lut3D,
        indices: np.ndarray,
        points: np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray, DomainExcursions]:
        model = self.model

        x = model.inverse_pre(points)
        y_stage = lut_stage.sample(points)
        render = model.forward_post(y_stage, x)
        below_black = self._verify_post(indices, y_stage, render, x)

        render_display = to_display(render)
        edited = lut_edit.sample(render_display)
        edited_linear = to_linear(edited)
        y_final = model.inverse_post(edited_linear, x)

        excursions = DomainExcursions(
            stage_below_black=below_black,
            display_out_of_range=_count_sites((render_display < 0.0) | (render_display > 1.0)),
            linear_below_zero=_count_sites(edited_linear < 0.0),
            output_out_of_range=_count_sites((y_final < 0.0) | (y_final > 1.0)),
        )
        return indices, y_final, excursions

    def _verify_post(self, indices: np.ndarray, y_stage: np.ndarray, render: np.ndarray, x: np.ndarray) -> int:
        """Round-trip ``g_x^-1(g_x(y_stage))`` and return the below-black site count.

        Channels the post stage clamps below black cannot come back, so a miss
        there is counted. A miss anywhere else means the model is not
        invertible and raises.
        """

        clamped = np.asarray(self.model.post_clamped(y_stage, x), dtype=bool)
        recovered = self.model.inverse_post(render, x)
        finite = np.isfinite(recovered)
        miss = ~finite | (np.abs(recovered - y_stage) > self.verify_tolerance)
        bad = np.any(~finite | (miss & ~clamped), axis=-1)
        if not bad.any():
            return _count_sites(miss & clamped)

        first = int(np.argmax(bad))
        coordinate = tuple(int(v) for v in indices[first])
        raise PipelineInvertibilityError(
            f"pipeline '{self.model.name}' post stage is not invertible at grid coordinate {coordinate}: "
            f"stage output {y_stage[first].tolist()} does not survive g_x followed by g_x^-1 "
            f"(got {recovered[first].tolist()}, {int(bad.sum())} site(s) affected)",
            coordinate=coordinate,
            stage="post",
        )


def _log_excursions(excursions: DomainExcursions, evaluated: int) -> None:
    if excursions.stage_below_black:
        logger.warning(
            "%d/%d grid sites hold stage values below black; the post stage clamps them and they cannot be inverted",
            excursions.stage_below_black,
            evaluated,
        )
    if excursions.display_out_of_range:
        logger.warning(
            "%d/%d grid sites rendered outside [0, 1]; edited LUT lookups clamped to its boundary",
            excursions.display_out_of_range,
            evaluated,
        )
    if excursions.linear_below_zero:
        logger.warning(
            "%d/%d grid sites edited below black; post stage inverse clamps at zero",
            excursions.linear_below_zero,
            evaluated,
        )
    if excursions.output_out_of_range:
        logger.warning(
            "%d/%d corrected values fall outside [0, 1] and will clip when quantized",
            excursions.output_out_of_range,
            evaluated,
        )


def correct_lut(
    lut_edit: Lut3D,
    lut_stage: Lut3D,
    model: PipelineModel | None = None,
    raw: bool = False,
    max_workers: int = 1,
) -> Lut3D:
    corrector = LutCorrector(model=model, max_workers=max_workers)
    if raw:
        return corrector.passthrough(lut_edit).lut
    return corrector.correct(lut_edit, lut_stage).lut
