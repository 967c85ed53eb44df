"""Authentication method resolution.

The configured method is resolved exactly once, before any host task
starts, into one of the AuthMethod variants.
"""

import logging
import os

import asyncssh

from boomerang.config.parser import RunOptions
from boomerang.models import AgentAuth, AuthMethod, PasswordAuth, PrivateKeyAuth

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """The configured authentication method could not be set up."""

    pass


def load_private_key(key_path: str, passphrase: str | None = None) -> PrivateKeyAuth:
    """Read a private key file into a PrivateKeyAuth.

    Raises:
        AuthError: If the file is unreadable or not a valid key
    """
    try:
        key = asyncssh.read_private_key(key_path, passphrase)
    except OSError as e:
        raise AuthError(f"unable to read private key {key_path}: {e}") from e
    except (asyncssh.KeyImportError, asyncssh.KeyEncryptionError) as e:
        raise AuthError(f"unable to parse private key {key_path}: {e}") from e

    logger.debug("Loaded private key %s (%s)", key_path, key.get_algorithm())
    return PrivateKeyAuth(key_path=key_path, key=key)


async def connect_agent(env_var: str = "SSH_AUTH_SOCK") -> AgentAuth:
    """Connect to the ssh-agent named by ``env_var`` and fetch its keys.

    Raises:
        AuthError: If the socket is unset or unreachable, or the agent
            holds no keys
    """
    socket_path = os.getenv(env_var)
    if not socket_path:
        raise AuthError(f"could not get {env_var} from env")

    try:
        agent = await asyncssh.connect_agent(socket_path)
    except (OSError, asyncssh.Error) as e:
        raise AuthError(f"could not connect to ssh-agent at {socket_path}: {e}") from e
    if agent is None:
        raise AuthError(f"could not connect to ssh-agent at {socket_path}")

    try:
        keys = await agent.get_keys()
    except (OSError, ValueError, asyncssh.Error) as e:
        agent.close()
        raise AuthError(f"signer failed: {e}") from e

    if not keys:
        agent.close()
        raise AuthError(
            f"unable to authenticate agent using [{env_var}]. Either key not loaded "
            "or has passphrase, confirm with ssh-add -l and load with ssh-add"
        )

    logger.debug("ssh-agent at %s offers %d key(s)", socket_path, len(keys))
    return AgentAuth(socket_path=socket_path, agent=agent, keys=tuple(keys))


async def resolve_auth(options: RunOptions) -> AuthMethod:
    """Resolve the run-wide authentication method from config options.

    Raises:
        AuthError: If the method is unknown or its credential is unusable
    """
    if options.auth == "key":
        if not options.key_location:
            raise AuthError("must include key_location when auth=key")
        auth: AuthMethod = load_private_key(options.key_location, options.key_passphrase)
    elif options.auth == "agent":
        auth = await connect_agent(options.agent_ssh_auth)
    elif options.auth == "password":
        if not options.password:
            raise AuthError("must include password when auth=password")
        auth = PasswordAuth(password=options.password)
    else:
        raise AuthError(
            f"unsupported auth method: {options.auth}. Must use key, agent or password"
        )

    logger.info("Using %s authentication", auth.method)
    return auth


async def close_auth(auth: AuthMethod) -> None:
    """Release resources held by an auth method (the agent connection)."""
    if isinstance(auth, AgentAuth):
        auth.agent.close()
        await auth.agent.wait_closed()
