class PoolCascadeError(Exception):
    pass


class InvalidPlatform(PoolCascadeError):
    def __init__(self, platform: str) -> None:
        super().__init__(f"unsupported pool platform: {platform!r}")
        self.platform = platform


class PoolNotFound(PoolCascadeError):
    def __init__(self, platform: str, pool_id: int | str) -> None:
        super().__init__(f"{platform} pool {pool_id} not found")
        self.platform = platform
        self.pool_id = pool_id


class ProjectNotFound(PoolCascadeError):
    def __init__(self, project_id: int) -> None:
        super().__init__(f"project {project_id} not found")
        self.project_id = project_id


class TokenNotFound(PoolCascadeError):
    def __init__(self, token_id: int) -> None:
        super().__init__(f"token {token_id} not found")
        self.token_id = token_id


class NotMigratable(PoolCascadeError):
    pass


class UpdateFailed(PoolCascadeError):
    pass


class CreateFailed(PoolCascadeError):
    pass


class DependencyExists(PoolCascadeError):
    """Delete refused because other rows still reference the target."""

    def __init__(self, message: str, **counts: int) -> None:
        super().__init__(message)
        self.counts = counts
