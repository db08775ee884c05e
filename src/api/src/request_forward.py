"""
Forwards a traffic advice request to an origin and describes what came back.

The browser can't read a cross-origin /.well-known/traffic-advice itself,
so this fetches it server-side and hands back everything the checkup page
needs: the response type, status, headers, MIME essence and, when the
response really is traffic advice, the body as base64.
"""
from typing import AsyncIterator, List, Optional, Tuple
import base64
import enum
import logging

import httpx

from config import MAX_BODY_SIZE, TRAFFIC_ADVICE_MIME_TYPE, USER_AGENT
from mime_type import essence_of
from origin_guard import traffic_advice_url

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "Accept": TRAFFIC_ADVICE_MIME_TYPE,
    "User-Agent": USER_AGENT,
}
# What a server-side fetch reports for any network response, redirects included
RESPONSE_TYPE = "default"
UNREACHABLE = "unreachable"


class Unreachable(Exception):
    pass


class BodyState(enum.Enum):
    COMPLETE = None
    TOO_LARGE = "body too large"
    READ_ERROR = "error reading body"


async def open_traffic_advice(client: httpx.AsyncClient, url: httpx.URL) -> httpx.Response:
    """Send the GET and return as soon as headers arrive; the body is left unread."""
    request = client.build_request("GET", url, headers=REQUEST_HEADERS)
    try:
        return await client.send(request, stream=True, follow_redirects=False)
    except httpx.RequestError as error:
        raise Unreachable(str(error) or type(error).__name__) from error


def header_pairs(headers: httpx.Headers) -> List[List[str]]:
    """
    List headers the way a fetch ``Headers`` object iterates them.

    Names are lowercase and sorted, repeated headers are joined with ", ",
    and set-cookie is the exception that keeps one entry per value.
    """
    combined = {}
    cookies = []
    for name, value in headers.multi_items():
        if name == "set-cookie":
            cookies.append(value)
        elif name in combined:
            combined[name] = f"{combined[name]}, {value}"
        else:
            combined[name] = value

    pairs = [[name, value] for name, value in combined.items()]
    pairs.extend(["set-cookie", cookie] for cookie in cookies)
    # sort is stable, so set-cookie values stay in arrival order
    pairs.sort(key=lambda pair: pair[0])
    return pairs


def describe_response(response: httpx.Response) -> dict:
    # Only the first Content-Type is considered. Nobody sends two.
    content_types = response.headers.get_list("content-type")
    return {
        "type": RESPONSE_TYPE,
        "status": response.status_code,
        "headers": header_pairs(response.headers),
        "essence": essence_of(content_types[0]) if content_types else None,
    }


async def read_body(
    chunks: AsyncIterator[bytes], limit: int = MAX_BODY_SIZE
) -> Tuple[BodyState, bytes]:
    """
    Copy ``chunks`` into a buffer of ``limit`` bytes.

    Stops at the first chunk that doesn't fit (``TOO_LARGE``) or the first
    read failure (``READ_ERROR``). Whatever was written before that is
    returned alongside the state.
    """
    buffer = bytearray(limit)
    offset = 0
    state = BodyState.COMPLETE
    try:
        async for chunk in chunks:
            if len(chunk) > limit - offset:
                state = BodyState.TOO_LARGE
                break
            buffer[offset : offset + len(chunk)] = chunk
            offset += len(chunk)
    except httpx.RequestError as error:
        logger.warning("Error reading body: %s", error)
        state = BodyState.READ_ERROR

    return state, bytes(buffer[:offset])


async def check_traffic_advice(
    origin: str, transport: Optional[httpx.AsyncBaseTransport] = None
) -> dict:
    """
    Fetch ``origin``'s traffic advice and build the report for the checkup page.

    Raises ``origin_guard.InvalidOrigin`` before any request is made if the
    origin isn't one we're willing to fetch. Network failures and body
    problems never raise; they show up in the report's ``error`` field.
    """
    url = traffic_advice_url(origin)

    async with httpx.AsyncClient(transport=transport, follow_redirects=False) as client:
        try:
            response = await open_traffic_advice(client, url)
        except Unreachable as error:
            logger.warning("Could not reach %s: %s", url, error)
            return {"error": UNREACHABLE}

        try:
            info = describe_response(response)
            logger.info("%s responded %s (%s)", url, info["status"], info["essence"])

            # Only read the body if it claims to be traffic advice
            if response.is_success and info["essence"] == TRAFFIC_ADVICE_MIME_TYPE:
                state, body = await read_body(response.aiter_bytes())
                if state is BodyState.COMPLETE:
                    info["body"] = base64.b64encode(body).decode("ascii")
                else:
                    logger.warning("Discarding body from %s: %s", url, state.value)
                    info["error"] = state.value
        finally:
            await response.aclose()

    return info
