"""Bridge authority config loading for deployment-registry library."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .slots import is_valid_address
from .types import BridgeAuthority

logger = logging.getLogger(__name__)


def load_authority_config(config_path: Union[Path, str]) -> Optional[Dict[str, Any]]:
    """
    Load the bridge authority config, or return None.

    Args:
        config_path: Path to the authority config JSON file

    Returns:
        Parsed config, or None if the file doesn't exist or is corrupted
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            config = json.load(f)
    except FileNotFoundError:
        logger.warning("Bridge authority config not found: %s", config_path)
        return None
    except json.JSONDecodeError as e:
        logger.error("Error reading bridge authority config %s: %s", config_path, e)
        return None

    if not isinstance(config, dict):
        logger.error("Bridge authority config %s is not a JSON object", config_path)
        return None

    return config


def authority_for_chain(
    config: Optional[Dict[str, Any]], chain_name: Optional[str]
) -> Optional[BridgeAuthority]:
    """
    Extract canonical bridge addresses for one chain.

    Accepts both the full config document (chains nested under "chains")
    and a bare mapping of chain name -> chain entry.

    Args:
        config: Parsed authority config (None when unavailable)
        chain_name: Chain's key in the config (None if not bridged)

    Returns:
        BridgeAuthority, or None if the chain has no usable entry
    """
    if config is None or chain_name is None:
        return None

    chains = config.get("chains", config)
    entry = chains.get(chain_name) if isinstance(chains, dict) else None
    if not isinstance(entry, dict):
        logger.warning("No bridge authority data found for %s", chain_name)
        return None

    try:
        manager = entry["manager"]
        transceiver = entry["transceivers"]["wormhole"]["address"]
    except (KeyError, TypeError):
        logger.warning("Incomplete bridge authority data for %s", chain_name)
        return None

    for address in (manager, transceiver):
        if not is_valid_address(address):
            logger.warning("Invalid bridge authority address for %s: %r", chain_name, address)
            return None

    return BridgeAuthority(manager=manager, transceiver=transceiver)
