#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

from brokers import (avanza, bitvavo, bux, coinbase, cointracking, cryptocom, degiro, delta, directa, disnat, etoro,
                     finpension, freetrade, ibkr, investengine, investimental, parqet, rabobank, relai, revolut,
                     saxo, schwab, swissquote, traderepublic, trading212, xtb)
from brokers.schema_mapping import SchemaMapping
from exceptions import UnknownFormatError
from format_detector import BrokerId


logger = logging.getLogger(__name__)

MAPPINGS: dict[BrokerId, SchemaMapping] = {
    BrokerId.AVANZA: avanza.MAPPING,
    BrokerId.BITVAVO: bitvavo.MAPPING,
    BrokerId.BUX: bux.MAPPING,
    BrokerId.COINBASE: coinbase.MAPPING,
    BrokerId.COINTRACKING: cointracking.MAPPING,
    BrokerId.CRYPTOCOM: cryptocom.MAPPING,
    BrokerId.DEGIRO: degiro.MAPPING,
    BrokerId.DEGIRO_V3: degiro.MAPPING_V3,
    BrokerId.DELTA: delta.MAPPING,
    BrokerId.DIRECTA: directa.MAPPING,
    BrokerId.DISNAT: disnat.MAPPING,
    BrokerId.ETORO: etoro.MAPPING,
    BrokerId.FINPENSION: finpension.MAPPING,
    BrokerId.FREETRADE: freetrade.MAPPING,
    BrokerId.IBKR: ibkr.MAPPING,
    BrokerId.INVESTENGINE: investengine.MAPPING,
    BrokerId.INVESTIMENTAL: investimental.MAPPING,
    BrokerId.PARQET: parqet.MAPPING,
    BrokerId.RABOBANK: rabobank.MAPPING,
    BrokerId.RELAI: relai.MAPPING,
    BrokerId.REVOLUT: revolut.MAPPING,
    BrokerId.SAXO: saxo.MAPPING,
    BrokerId.SCHWAB: schwab.MAPPING,
    BrokerId.SWISSQUOTE: swissquote.MAPPING,
    BrokerId.TRADEREPUBLIC: traderepublic.MAPPING,
    BrokerId.TRADING212: trading212.MAPPING,
    BrokerId.XTB: xtb.MAPPING,
}

# Short names accepted on the command line
ALIASES = {
    "bv": BrokerId.BITVAVO,
    "cb": BrokerId.COINBASE,
    "ct": BrokerId.COINTRACKING,
    "fp": BrokerId.FINPENSION,
    "ft": BrokerId.FREETRADE,
    "ie": BrokerId.INVESTENGINE,
    "sq": BrokerId.SWISSQUOTE,
    "tr": BrokerId.TRADEREPUBLIC,
    "t212": BrokerId.TRADING212,
}


def formats_supported() -> list[str]:
    return sorted(broker.value for broker in MAPPINGS)


def resolve_alias(name: str) -> BrokerId:
    """
    Turn a broker name or alias as typed by the user into a BrokerId.

    Raises:
        UnknownFormatError: If the name is neither a broker nor an alias
    """
    key = name.strip().lower()
    if key in ALIASES:
        return ALIASES[key]
    try:
        broker = BrokerId(key)
    except ValueError:
        raise UnknownFormatError(f"Unknown broker '{name}', supported: {', '.join(formats_supported())}")
    if broker not in MAPPINGS:
        raise UnknownFormatError(f"Unknown broker '{name}'")
    return broker


def get_mapping(broker: BrokerId) -> SchemaMapping:
    mapping = MAPPINGS.get(broker)
    if mapping is None:
        logger.error(f"No mapping registered for {broker.value}")
        raise UnknownFormatError(f"Format {broker.value} not supported")
    return mapping
