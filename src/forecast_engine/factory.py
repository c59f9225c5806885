"""
Engine Factory
==============

Central place where callers obtain a forecasting engine.

Only the statistical engine exists today. The factory keeps the selection
logic in one spot so an ML engine can be slotted in behind the same
``Forecaster`` contract without touching callers.
"""

import logging
from typing import Dict, List, Optional

from .config import EngineSettings
from .engine import AnalyticsCapability, Forecaster, StatisticalForecastingEngine

LOGGER = logging.getLogger(__name__)

ML_MIN_DATA_POINTS = 100
STATISTICAL_ONLY_BELOW = 50
ML_ACCURACY_REQUIREMENT = 0.9
ML_RECOMMENDED_ABOVE = 500

COMPLEXITY_LEVELS = ("SIMPLE", "MODERATE", "COMPLEX")


class EngineFactory:
    """
    Select and describe forecasting engines.

    Parameters
    ----------
    settings : EngineSettings, optional
        Passed on to every engine the factory creates.

    Examples
    --------
    >>> factory = EngineFactory()
    >>> engine = factory.get_forecasting_engine(data_size=36)
    >>> factory.engine_recommendations(size=20)["recommended"]
    'STATISTICAL'
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self._registry: Dict[str, type] = {
            "statistical-forecasting": StatisticalForecastingEngine,
        }
        LOGGER.debug("Initialized %d analytics engines", len(self._registry))

    @property
    def registered_engines(self) -> List[str]:
        return sorted(self._registry)

    def get_forecasting_engine(
        self,
        data_size: int,
        complexity: str = "SIMPLE",
        prefer_ml: bool = False,
    ) -> Forecaster:
        """
        Return the engine best suited to a series.

        Parameters
        ----------
        data_size : int
            Number of points the caller will forecast from.
        complexity : {"SIMPLE", "MODERATE", "COMPLEX"}, default="SIMPLE"
            Caller's estimate of the series complexity.
        prefer_ml : bool, default=False
            Ask for an ML engine when one is available.

        Raises
        ------
        ValueError
            If ``complexity`` is not a known level.
        """
        if complexity not in COMPLEXITY_LEVELS:
            raise ValueError(
                f"Invalid complexity: {complexity}. Must be one of {COMPLEXITY_LEVELS}"
            )

        if not prefer_ml or data_size < ML_MIN_DATA_POINTS:
            LOGGER.info("Using statistical forecasting engine")
        else:
            LOGGER.info("ML engine unavailable, falling back to statistical forecasting engine")
        return StatisticalForecastingEngine(self.settings)

    def available_capabilities(self) -> List[AnalyticsCapability]:
        capabilities: List[AnalyticsCapability] = []
        for engine_cls in self._registry.values():
            for capability in engine_cls.capabilities:
                if capability not in capabilities:
                    capabilities.append(capability)
        return capabilities

    def is_ml_available(self) -> bool:
        return False

    def engine_recommendations(
        self,
        size: int,
        accuracy_requirement: float = 0.0,
    ) -> Dict[str, object]:
        """
        Recommend an engine family for a data profile.

        Returns
        -------
        dict
            ``recommended`` (str), ``alternatives`` (list[str]) and
            ``reasoning`` (str).
        """
        if size < STATISTICAL_ONLY_BELOW:
            return {
                "recommended": "STATISTICAL",
                "alternatives": [],
                "reasoning": "Insufficient data for ML approaches",
            }

        if accuracy_requirement > ML_ACCURACY_REQUIREMENT and size > ML_RECOMMENDED_ABOVE:
            return {
                "recommended": "ML",
                "alternatives": ["STATISTICAL"],
                "reasoning": "High accuracy requirements with sufficient data favor ML",
            }

        return {
            "recommended": "STATISTICAL",
            "alternatives": ["ML"],
            "reasoning": "Statistical methods provide good balance of speed and accuracy",
        }

    def health_check(self) -> Dict[str, bool]:
        statistical = True
        ml = self.is_ml_available()
        return {"statistical": statistical, "ml": ml, "overall": statistical or ml}


__all__ = ["EngineFactory"]
