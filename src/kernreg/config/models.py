from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

Method = Literal["krr", "cg", "both"]


class DatasetConfig(BaseModel):
    n: int = Field(1000, ge=1, description="Number of training samples")
    noise: float = Field(0.1, ge=0.0, description="Std of Gaussian noise added to sinc targets")
    seed: int | None = Field(0, description="RNG seed; null for a fresh draw")
    low: float = Field(-4.0, description="Lower end of the uniform sampling interval")
    high: float = Field(4.0, description="Upper end of the uniform sampling interval")

    @model_validator(mode="after")
    def ordered_interval(self) -> DatasetConfig:
        if self.low >= self.high:
            raise ValueError("low must be smaller than high")
        return self


class KernelConfig(BaseModel):
    width: float = Field(1.0, gt=0.0, description="Gaussian kernel width w")
    lam: float = Field(1e-6, ge=0.0, description="Ridge regularization lambda")


class CGConfig(BaseModel):
    thresh: float = Field(1e-6, gt=0.0, description="Residual-norm convergence threshold")
    max_iter: int | None = Field(
        default=None, ge=1, description="Iteration cap; defaults to 10 * n"
    )


class ExperimentConfig(BaseModel):
    name: str = Field("sinc", description="Experiment label, copied into results")
    method: Method = Field("both", description="Which solver(s) to run")
    dataset: DatasetConfig = Field(default=DatasetConfig())
    kernel: KernelConfig = Field(default=KernelConfig())
    cg: CGConfig = Field(default=CGConfig())
    n_eval: int = Field(
        1000, ge=0, description="Fresh uniform points for noise-free KRR test error; 0 to skip"
    )
    artifacts_dir: str = Field("artifacts", description="Root directory for run artifacts")

    @classmethod
    def json_schema(cls) -> dict:
        return cls.model_json_schema()


def validate_config_payload(payload: dict) -> ExperimentConfig:
    try:
        return ExperimentConfig.model_validate(payload)
    except ValidationError as e:
        raise ValueError(e) from e
