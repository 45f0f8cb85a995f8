"""
Broker CSV Format Detector

Detects which broker a CSV export originates from by comparing its header
line against the known header signatures of every supported broker.

Matching uses a normalized Levenshtein similarity:

    similarity = (max_len - distance) / max_len

The best scoring signature wins when its similarity is above
const.DETECTION_THRESHOLD, otherwise the file is reported as unknown.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
import os
from enum import Enum

from rapidfuzz.distance import Levenshtein

import constants as const


# Module-level logger
logger = logging.getLogger(__name__)


class BrokerId(Enum):
    """Enumeration of supported broker formats"""
    AVANZA = "avanza"
    BITVAVO = "bitvavo"
    BUX = "bux"
    COINBASE = "coinbase"
    COINTRACKING = "cointracking"
    CRYPTOCOM = "cryptocom"
    DEGIRO = "degiro"
    DEGIRO_V3 = "degiro-v3"
    DELTA = "delta"
    DIRECTA = "directa"
    DISNAT = "disnat"
    ETORO = "etoro"
    FINPENSION = "finpension"
    FREETRADE = "freetrade"
    IBKR = "ibkr"
    INVESTENGINE = "investengine"
    INVESTIMENTAL = "investimental"
    PARQET = "parqet"
    RABOBANK = "rabobank"
    RELAI = "relai"
    REVOLUT = "revolut"
    SAXO = "saxo"
    SCHWAB = "schwab"
    SWISSQUOTE = "swissquote"
    TRADEREPUBLIC = "traderepublic"
    TRADING212 = "trading212"
    XTB = "xtb"
    UNKNOWN = "unknown"


# Header line of every known export, in detection order. Brokers with several
# export revisions have one entry per revision.
HEADER_SIGNATURES: list[tuple[str, BrokerId]] = [
    ("Datum;Konto;Typ av transaktion;Värdepapper/beskrivning;Antal;Kurs;Belopp;Transaktionsvaluta;"
     "Courtage (SEK);Valutakurs;Instrumentvaluta;ISIN;Resultat", BrokerId.AVANZA),
    ("Timezone,Date,Time,Type,Currency,Amount,Quote Currency,Quote Price,Received / Paid Currency,"
     "Received / Paid Amount,Fee currency,Fee amount,Status,Transaction ID,Address", BrokerId.BITVAVO),
    ("Transaction Time (CET),Transaction Category,Transaction Type,Asset Id,Asset Name,Asset Currency,"
     "Transaction Currency,Currency Pair,Exchange Rate,Transaction Amount,Trade Amount,Trade Price,"
     "Trade Quantity,Cash Balance Amount,Profit And Loss Amount,Profit And Loss Currency", BrokerId.BUX),
    ("ID,Timestamp,Transaction Type,Asset,Quantity Transacted,Price Currency,Price at Transaction,Subtotal,"
     "Total (inclusive of fees and/or spread),Fees and/or Spread,Notes", BrokerId.COINBASE),
    ('"Type","Buy","Cur.","Sell","Cur.","Fee","Cur.","Exchange","Group","Comment","Date","Tx-ID"',
     BrokerId.COINTRACKING),
    ("Timestamp (UTC),Transaction Description,Currency,Amount,To Currency,To Amount,Native Currency,"
     "Native Amount,Native Amount (in USD),Transaction Kind,Transaction Hash", BrokerId.CRYPTOCOM),
    ("Datum,Tijd,Valutadatum,Product,ISIN,Omschrijving,FX,Mutatie,,Saldo,,Order Id", BrokerId.DEGIRO),
    ("Date,Way,Base amount,Base currency (name),Base type,Quote amount,Quote currency,Exchange,"
     "Sent/Received from,Sent to,Fee amount,Fee currency (name),Broker,Notes", BrokerId.DELTA),
    ("Data operazione,Data valuta,Tipo operazione,Ticker,Isin,Protocollo,Descrizione,Quantità,"
     "Importo euro,Importo Divisa,Divisa,Riferimento ordine", BrokerId.DIRECTA),
    ("Date de transaction,Date de règlement,Type de transaction,Classe d'actif,Symbole,Description,Marché,"
     "Quantité,Prix,Devise du prix,Commission payée,Montant de l'opération,Devise du compte", BrokerId.DISNAT),
    ("Date,Type,Details,Amount,Units,Realized Equity Change,Realized Equity,Balance,Position ID,"
     "Asset type,NWA", BrokerId.ETORO),
    ('Date;Category;"Asset Name";ISIN;"Number of Shares";"Asset Currency";"Currency Rate";'
     '"Asset Price in CHF";"Cash Flow";Balance', BrokerId.FINPENSION),
    ("Title,Type,Timestamp,Account Currency,Total Amount,Buy / Sell,Ticker,ISIN,"
     "Price per Share in Account Currency,Stamp Duty,Quantity,Venue,Order ID,Order Type,"
     "Instrument Currency,Total Shares Amount,Price per Share,FX Rate,Base FX Rate,FX Fee (BPS),"
     "FX Fee Amount,Dividend Ex Date,Dividend Pay Date,Dividend Eligible Quantity,"
     "Dividend Amount Per Share,Dividend Gross Distribution Amount,Dividend Net Distribution Amount,"
     "Dividend Withheld Tax Percentage,Dividend Withheld Tax Amount", BrokerId.FREETRADE),
    ('"Buy/Sell","TradeDate","ISIN","Quantity","TradePrice","TradeMoney","CurrencyPrimary",'
     '"IBCommission","IBCommissionCurrency"', BrokerId.IBKR),
    ('"Type","SettleDate","ISIN","Description","Amount","CurrencyPrimary"', BrokerId.IBKR),
    ("Security / ISIN,Transaction Type,Quantity,Share Price,Total Trade Value,Trade Date/Time,"
     "Settlement Date,Broker", BrokerId.INVESTENGINE),
    ("Trades Date,Exchange,Symbol,Side,Trades Count,Average Price,Total Volume,Total Value,Total Fees,"
     "Account ID,Account Name", BrokerId.INVESTIMENTAL),
    ('"datetime";"date";"time";"price";"shares";"amount";"tax";"fee";"realizedgains";"type";"broker";'
     '"assettype";"identifier";"wkn";"originalcurrency";"currency";"fxrate";"holding";"holdingname";'
     '"holdingnickname";"exchange";"avgholdingperiod"', BrokerId.PARQET),
    ("Portefeuille;Naam;Datum;Type mutatie;Valuta mutatie;Volume;Koers;Valuta koers;Valuta kosten €;"
     "Waarde;Bedrag;Isin code;Tijd;Beurs", BrokerId.RABOBANK),
    ("Date,Transaction Type,BTC Amount,BTC Price,Currency Pair,Fiat Amount (excl. fees),Fiat Currency,"
     "Fee,Fee Currency,Destination,Operation ID,Counterparty", BrokerId.RELAI),
    ("Symbol,Type,Quantity,Price,Value,Fees,Date", BrokerId.REVOLUT),
    ("Date,Ticker,Type,Quantity,Price per share,Total Amount,Currency,FX Rate", BrokerId.REVOLUT),
    ("Client ID,Trade Date,Value Date,Type,Instrument,Instrument ISIN,Instrument currency,"
     "Exchange Description,Instrument Symbol,Event,Amount,Order ID,Conversion Rate", BrokerId.SAXO),
    ("Date,Action,Symbol,Description,Quantity,Price,Fees & Comm,Amount", BrokerId.SCHWAB),
    ("Date;Order #;Transaction;Symbol;Name;ISIN;Quantity;Unit price;Costs;Accrued Interest;Net Amount;"
     "Balance;Currency", BrokerId.SWISSQUOTE),
    ("Datum;Transactietype;Waarde (netto);Opmerking;ISIN;Aantal;Kosten;Belasting", BrokerId.TRADEREPUBLIC),
    ("Date;Type;Value;Note;ISIN;Shares;Fees;Taxes", BrokerId.TRADEREPUBLIC),
    ("Action,Time,ISIN,Ticker,Name,No. of shares,Price / share,Currency (Price / share),Exchange rate,"
     "Result,Currency (Result),Total,Currency (Total),Withholding tax,Currency (Withholding tax),Notes,ID,"
     "Currency conversion fee", BrokerId.TRADING212),
    ("ID;Type;Time;Symbol;Comment;Amount", BrokerId.XTB),
]


def similarity(a: str, b: str) -> float:
    """
    Normalized edit-distance similarity between two strings.

    Returns:
        1.0 for identical strings, 0.0 for completely different strings
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - Levenshtein.distance(a, b)) / max_len


def first_line(text: str) -> str:
    if not text:
        return ""
    return text.lstrip("\ufeff").split("\n", 1)[0].strip()


class FormatDetector:
    """
    Identifies the broker format of a CSV export by its header line.

    Usage:
        detector = FormatDetector()
        broker = detector.detect(text)
        broker, confidence = detector.identify("export.csv")
    """

    def __init__(self, signatures: list[tuple[str, BrokerId]] | None = None,
                 threshold: float | None = None, force_degiro_v3: bool | None = None):
        self.signatures = signatures if signatures is not None else HEADER_SIGNATURES
        self.threshold = threshold if threshold is not None else const.DETECTION_THRESHOLD
        self.force_degiro_v3 = force_degiro_v3 if force_degiro_v3 is not None else const.DEGIRO_FORCE_V3

    def best_match(self, text: str) -> tuple[BrokerId, float]:
        """
        Score the header line of the text against every signature.

        Returns:
            Tuple of (BrokerId, similarity) for the best scoring signature.
            Ties go to the signature listed first.
        """
        header = first_line(text)
        if not header:
            return (BrokerId.UNKNOWN, 0.0)

        best_broker = BrokerId.UNKNOWN
        best_score = 0.0
        for signature, broker in self.signatures:
            score = similarity(header, signature)
            if score > best_score:
                best_broker, best_score = broker, score

        return (best_broker, best_score)

    def detect(self, text: str) -> BrokerId:
        """
        Detect the broker format of CSV text.

        Args:
            text: The file contents (only the first line is used)

        Returns:
            The detected BrokerId, or BrokerId.UNKNOWN
        """
        broker, score = self.best_match(text)

        if score <= self.threshold:
            logger.info(f"No broker format matched (best: {broker.value} at {score:.1%})")
            return BrokerId.UNKNOWN

        logger.debug(f"Detected {broker.value} with {score:.1%} similarity")
        return self.redirect(broker)

    def redirect(self, broker: BrokerId) -> BrokerId:
        """Remap a detected format onto the variant configured to replace it"""
        if broker == BrokerId.DEGIRO and self.force_degiro_v3:
            logger.info("Using DEGIRO V3 converter because DEGIRO_FORCE_V3 is set")
            return BrokerId.DEGIRO_V3
        return broker

    def identify(self, file_path: str) -> tuple[BrokerId, float]:
        """
        Identify the broker format of a CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            Tuple of (BrokerId, confidence_score), confidence between 0.0 and 1.0
        """
        if not os.path.exists(file_path):
            logger.error(f"File not found: {file_path}")
            raise FileNotFoundError(f"File not found: {file_path}")

        with open(file_path, encoding="utf-8-sig") as f:
            header = f.readline()

        broker = self.detect(header)
        _, score = self.best_match(header)
        return (broker, score)
