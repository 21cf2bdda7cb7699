"""CalcService - calculator microservice with persistent history."""

__version__ = "1.0.0"
