"""
Parser SSE (Server-Sent Events) incrémental.

Le transport peut couper une trame n'importe où (au milieu d'une ligne
`data:`, entre `\\r` et `\\n`, au milieu d'un caractère UTF-8). Le parser
bufferise et ne dispatche un événement qu'à la ligne vide qui le termine.
"""
import codecs
import logging
import re
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional, Union

logger = logging.getLogger(__name__)

_LINE_END = re.compile(r"\r\n|\r|\n")
_BOM = "\ufeff"


@dataclass(frozen=True)
class SSEEvent:
    """Un événement SSE complet."""
    data: str
    event: Optional[str] = None
    id: Optional[str] = None


class SSEParser:
    """
    Parser SSE à alimenter morceau par morceau.

    Exemple:
        parser = SSEParser()
        for raw in reads:
            for event in parser.feed(raw):
                ...
        parser.flush()
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._started = False
        self._data_lines: List[str] = []
        self._event_type: Optional[str] = None
        self.last_event_id: Optional[str] = None
        self.reconnect_interval: Optional[int] = None

    def feed(self, chunk: Union[bytes, str]) -> List[SSEEvent]:
        """Ajoute un morceau brut et retourne les événements complets."""
        if isinstance(chunk, bytes):
            text = self._decoder.decode(chunk)
        else:
            text = chunk
        self._append(text)
        return self._drain(final=False)

    def flush(self) -> List[SSEEvent]:
        """
        Fin du body: traite les lignes restantes.

        Un enregistrement non terminé par une ligne vide est abandonné.
        """
        self._append(self._decoder.decode(b"", final=True))
        events = self._drain(final=True)
        if self._buffer or self._data_lines:
            logger.debug("[SSE] Enregistrement incomplet abandonné en fin de stream")
        self._buffer = ""
        self._data_lines = []
        self._event_type = None
        return events

    def _append(self, text: str) -> None:
        if not text:
            return
        if not self._started:
            self._started = True
            if text.startswith(_BOM):
                text = text[1:]
        self._buffer += text

    def _drain(self, final: bool) -> List[SSEEvent]:
        events = []
        while True:
            match = _LINE_END.search(self._buffer)
            if match is None:
                break
            # "\r" en fin de buffer: le "\n" peut arriver au prochain read
            if not final and match.group() == "\r" and match.end() == len(self._buffer):
                break
            line = self._buffer[:match.start()]
            self._buffer = self._buffer[match.end():]
            event = self._process_line(line)
            if event is not None:
                events.append(event)
        return events

    def _process_line(self, line: str) -> Optional[SSEEvent]:
        if line == "":
            return self._dispatch()
        if line.startswith(":"):
            return None

        if ":" in line:
            field_name, value = line.split(":", 1)
            if value.startswith(" "):
                value = value[1:]
        else:
            field_name, value = line, ""

        if field_name == "data":
            self._data_lines.append(value)
        elif field_name == "event":
            self._event_type = value
        elif field_name == "id":
            if "\0" not in value:
                self.last_event_id = value
        elif field_name == "retry":
            if value.isascii() and value.isdigit():
                self.reconnect_interval = int(value)
        return None

    def _dispatch(self) -> Optional[SSEEvent]:
        if not self._data_lines:
            self._event_type = None
            return None
        event = SSEEvent(
            data="\n".join(self._data_lines),
            event=self._event_type,
            id=self.last_event_id
        )
        self._data_lines = []
        self._event_type = None
        return event


async def aiter_sse_events(byte_stream: AsyncIterator[bytes]) -> AsyncIterator[SSEEvent]:
    """Transforme un flux d'octets bruts en flux d'événements SSE."""
    parser = SSEParser()
    async for chunk in byte_stream:
        for event in parser.feed(chunk):
            yield event
    for event in parser.flush():
        yield event
