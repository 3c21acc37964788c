# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Metric Observation Model."""

from pydantic import BaseModel, ConfigDict, model_validator

from pg_stat_exporter.models.model_metric_descriptor import ModelMetricDescriptor


class ModelMetricObservation(BaseModel):
    """A single point-in-time value for one labelled series of a descriptor.

    Construction fails when the number of label values does not match the
    descriptor's label schema.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    descriptor: ModelMetricDescriptor
    value: float
    label_values: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_label_arity(self) -> "ModelMetricObservation":
        expected = len(self.descriptor.label_names)
        if len(self.label_values) != expected:
            raise ValueError(
                f"{self.descriptor.name}: expected {expected} label values, "
                f"got {len(self.label_values)}"
            )
        return self

    @property
    def labels(self) -> dict[str, str]:
        """Label names zipped with their values."""
        return dict(zip(self.descriptor.label_names, self.label_values))


__all__ = ["ModelMetricObservation"]
