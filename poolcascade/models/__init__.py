from poolcascade.models.base import Base
from poolcascade.models.holder import (
    MeteoracpmmHolder,
    MeteoradbcHolder,
    PumpfunAmmPoolHolder,
    PumpfuninternalHolder,
    RaydiumPoolHolder,
)
from poolcascade.models.pool import (
    MeteoracpmmConfig,
    MeteoradbcConfig,
    PumpfunAmmPoolConfig,
    PumpfuninternalConfig,
    RaydiumCpmmPoolConfig,
    RaydiumLaunchpadPoolConfig,
    RaydiumPoolConfig,
    RaydiumPoolRelation,
)
from poolcascade.models.project import (
    ProjectConfig,
    ProjectFundTransferRecord,
    RoleConfigRelation,
    StrategyConfig,
    TokenConfig,
)

__all__ = [
    "Base",
    "ProjectConfig",
    "TokenConfig",
    "StrategyConfig",
    "RoleConfigRelation",
    "ProjectFundTransferRecord",
    "RaydiumPoolConfig",
    "RaydiumLaunchpadPoolConfig",
    "RaydiumCpmmPoolConfig",
    "RaydiumPoolRelation",
    "PumpfuninternalConfig",
    "PumpfunAmmPoolConfig",
    "MeteoradbcConfig",
    "MeteoracpmmConfig",
    "MeteoradbcHolder",
    "MeteoracpmmHolder",
    "RaydiumPoolHolder",
    "PumpfunAmmPoolHolder",
    "PumpfuninternalHolder",
]
