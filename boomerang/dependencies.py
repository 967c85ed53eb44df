"""Dependency container for one Boomerang run.

Holds the configuration together with everything resolved from it before
any host task starts: the connection policy (with its authentication method)
and the report writer.
"""

from dataclasses import dataclass

from boomerang.config import Config
from boomerang.models import ConnectionPolicy
from boomerang.protocols import ReportSink
from boomerang.services.auth import close_auth, resolve_auth
from boomerang.services.output import ReportWriter


@dataclass
class Dependencies:
    """Container for run dependencies.

    Example:
        deps = await Dependencies.create(Config.load("config.yaml"))
        try:
            report = await execute(hosts, deps.policy, deps.config.commands, ...)
        finally:
            await deps.cleanup()
    """

    config: Config
    policy: ConnectionPolicy
    writer: ReportSink

    @classmethod
    async def create(cls, config: Config) -> "Dependencies":
        """Resolve authentication and build the policy from config.

        Raises:
            AuthError: If the configured authentication method is unusable
        """
        options = config.options
        auth = await resolve_auth(options)
        policy = ConnectionPolicy(
            auth=auth,
            host_key_verification=options.host_key_check,
            connect_timeout=options.connection_timeout,
            retry_count=options.retry,
            retry_wait=options.retry_wait,
        )
        writer = ReportWriter(
            output_dir=options.output_dir,
            prefix=options.json_prefix,
            indent=options.indent_json,
            keep_latest_only=options.keep_latest_file_only,
        )
        return cls(config=config, policy=policy, writer=writer)

    async def cleanup(self) -> None:
        """Release resources held by the auth method."""
        await close_auth(self.policy.auth)
