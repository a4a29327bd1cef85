"""Parse, validate and swap in a downloaded configuration"""
import yaml
from pydantic import ValidationError

from cloudconfig.core.context import ConfigContext
from cloudconfig.core.exceptions import (
    ConfigUnchangedError,
    InvalidConfigurationError,
    ParseFailedError,
)
from cloudconfig.core.logging import get_logger
from cloudconfig.models.config import Configuration

logger = get_logger()

_TYPED_SCALAR_TAGS = frozenset({
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
})


class ConfigLoader(yaml.SafeLoader):
    """Safe loader that keeps plain scalars as their source text.

    Only null is still resolved implicitly. Versions such as ``2.10``, ids
    such as ``010`` or ``2015-06-01`` and numeric tokens reach the models
    unchanged; typed fields (weight, qos, pipelined, trusted) are converted
    by pydantic.
    """


ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TYPED_SCALAR_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_configuration(raw: bytes) -> Configuration:
    """Parse a YAML document into a candidate configuration.

    Raises:
        ParseFailedError: The bytes are not YAML, not a mapping, or do not fit the schema
    """
    try:
        document = yaml.load(raw, Loader=ConfigLoader)
    except yaml.YAMLError as e:
        raise ParseFailedError(str(e)) from e

    if not isinstance(document, dict):
        raise ParseFailedError(f"expected a mapping at top level, got {type(document).__name__}")

    try:
        return Configuration.model_validate(document)
    except ValidationError as e:
        raise ParseFailedError(f"{e.error_count()} schema error(s): {e.errors()[0]['msg']}") from e


class ConfigUpdater:
    """Replaces the live configuration with a newer, usable one"""

    def apply_update(self, context: ConfigContext, raw: bytes) -> Configuration:
        """Apply a downloaded document to the context.

        The candidate is built completely before the context lock is taken; the
        comparison and the swap then happen in one critical section. On any
        error the live configuration is left as it was.

        Returns:
            The configuration now live in the context

        Raises:
            ParseFailedError: The document cannot be parsed
            InvalidConfigurationError: The document has no chained servers
            ConfigUnchangedError: The document matches the live configuration
        """
        candidate = parse_configuration(raw)

        # Making sure we can actually use this configuration
        if not candidate.is_usable():
            logger.warning("Rejected configuration file without chained servers")
            raise InvalidConfigurationError()

        with context.locked() as current:
            if candidate.same_content(current):
                raise ConfigUnchangedError("Downloaded configuration matches the live one")
            context.swap(candidate)

        logger.info(
            f"Configuration updated: {len(candidate.client.chained_servers)} chained servers, "
            f"{len(candidate.trusted_cas)} trusted CAs, version={candidate.firetweet_version or '-'}"
        )
        return candidate
