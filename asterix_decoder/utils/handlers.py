from collections import Counter
from multiprocessing import Pool, cpu_count
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple
import logging

from asterix_decoder.config import DEFAULT_SETTINGS, DecoderSettings
from asterix_decoder.decoders.asterix_decoder_base import AsterixDecoderBase
from asterix_decoder.decoders.asterix_file_reader import iter_messages
from asterix_decoder.decoders.cat021_decoder import Cat021Decoder
from asterix_decoder.decoders.cat048_decoder import Cat048Decoder
from asterix_decoder.models.message import MessageDecodeResult, RawMessage
from asterix_decoder.types.enums import Category, DecodeFailure
from asterix_decoder.types.errors import TruncatedStreamError

logger = logging.getLogger(__name__)

# Decoders are stateless between messages; one pair per settings object
_decoders: Dict[DecoderSettings, Dict[Category, AsterixDecoderBase]] = {}


def _decoders_for(settings: Optional[DecoderSettings]) -> Dict[Category, AsterixDecoderBase]:
    settings = settings or DEFAULT_SETTINGS
    decoders = _decoders.get(settings)
    if decoders is None:
        decoders = {
            Category.CAT021: Cat021Decoder(settings),
            Category.CAT048: Cat048Decoder(settings),
        }
        _decoders[settings] = decoders
    return decoders


def decode_message(message: RawMessage, settings: Optional[DecoderSettings] = None) -> MessageDecodeResult:
    """Route one message to the decoder of its category."""
    decoder = _decoders_for(settings).get(message.category_type)
    if decoder is None:
        logger.debug("Unknown category %d at offset %d", message.category, message.block_offset)
        return MessageDecodeResult(
            message=message,
            failure=DecodeFailure.UNKNOWN_CATEGORY,
            detail=f"category {message.category} is not decoded",
        )
    return decoder.decode_message(message)


def decode_messages(messages: Iterable[RawMessage],
                    settings: Optional[DecoderSettings] = None) -> List[MessageDecodeResult]:
    """Decode a list of messages in order."""
    return [decode_message(message, settings) for message in messages]


def decode_messages_iter(messages: Iterable[RawMessage],
                         settings: Optional[DecoderSettings] = None) -> Iterator[MessageDecodeResult]:
    """
    Decode messages lazily and yield results one by one.
    This avoids materializing the entire list before deriving/exporting.
    """
    for message in messages:
        yield decode_message(message, settings)


def truncated_result(error: TruncatedStreamError) -> MessageDecodeResult:
    """Result standing for a torn tail block: no records, TRUNCATED_STREAM."""
    return MessageDecodeResult(
        message=error.fragment,
        failure=DecodeFailure.TRUNCATED_STREAM,
        detail=str(error),
    )


def decode_buffer(buffer, settings: Optional[DecoderSettings] = None) -> List[MessageDecodeResult]:
    """Frame and decode a whole in-memory recording. A torn tail is reported as the last result."""
    torn: List[TruncatedStreamError] = []
    results = decode_messages(iter_messages(buffer, on_truncated=torn.append), settings)
    results.extend(truncated_result(error) for error in torn)
    return results


# ============================================================
# WORKER FUNCTION (must be at module level for pickling)
# ============================================================
def _decode_chunk(task: Tuple[Optional[DecoderSettings], Sequence[RawMessage]]) -> List[MessageDecodeResult]:
    settings, messages = task
    return decode_messages(messages, settings)


def default_worker_count() -> int:
    total_cores = cpu_count()
    if total_cores <= 2:
        return 1
    if total_cores <= 4:
        return total_cores - 1
    return total_cores - 2


def decode_messages_parallel(messages: Iterable[RawMessage],
                             settings: Optional[DecoderSettings] = None,
                             processes: Optional[int] = None,
                             chunksize: Optional[int] = None) -> List[MessageDecodeResult]:
    """
    Decode messages across a worker Pool. Each worker owns whole messages; results
    come back in message order. Falls back to in-process decoding for one worker.
    """
    messages = list(messages)
    processes = processes or default_worker_count()
    if processes <= 1 or len(messages) < 2:
        return decode_messages(messages, settings)

    chunksize = chunksize or max(1, len(messages) // (processes * 4))
    chunks = [(settings, messages[i:i + chunksize]) for i in range(0, len(messages), chunksize)]
    logger.info("Decoding %d message(s) in %d chunk(s) on %d worker(s)", len(messages), len(chunks), processes)

    results = []
    with Pool(processes=processes) as pool:
        # imap keeps chunk order
        for chunk_results in pool.imap(_decode_chunk, chunks):
            results.extend(chunk_results)
    return results


def summarize(results: Iterable[MessageDecodeResult]) -> dict:
    """Counts of messages and records per category, and of failures per reason."""
    messages = Counter()
    records = Counter()
    failures = Counter()
    for result in results:
        messages[result.category] += 1
        records[result.category] += result.decoded_count
        if result.failure is not None:
            failures[result.failure] += 1
    return {
        "messages": dict(messages),
        "records": dict(records),
        "failures": dict(failures),
        "total_messages": sum(messages.values()),
        "total_records": sum(records.values()),
    }
