"""
AI resolution pass

Resolves ``::ai`` directives into completion text before the synchronous
directive engine runs. Two forms are recognised:

    ::ai [model=NAME] prompt text            (inline, one line)

    ::ai [key=value ...]                     (block)
    prompt spanning
    several lines
    ::end

Every occurrence is resolved one after the other in document order and
spliced back by position, so two byte-identical directives receive the
responses of the first and second call respectively.

The completion service is injected. Anything with an ``enabled`` flag and
an ``async call(prompt, options)`` method will do; OpenRouterService talks
to OpenRouter through litellm.
"""

import asyncio
import re
from typing import Any, Dict, List, Optional, Protocol, Tuple

from loguru import logger

from .log import LOG, DiagnosticLogger
from .text import args_onlyKeyValues, args_parse

# Leading horizontal whitespace is tolerated before ::ai and ::end
_AI_BLOCK = re.compile(r"^[^\S\n]*::ai(?![\w-])([^\n]*)\n([\s\S]*?)^[^\S\n]*::end[^\S\n]*$", re.MULTILINE)
_AI_INLINE = re.compile(r"^[^\S\n]*::ai[^\S\n]+(.+)$", re.MULTILINE)
_MODEL_PREFIX = re.compile(r"^model=(\S+)\s+([\s\S]+)$")

DISABLED_INLINE = '<aside class="note">[AI disabled]</aside>'
DISABLED_BLOCK = '<aside class="warning">[AI disabled]</aside>'


def errorMarker_make(message: str, block: bool) -> str:
    """Inline marker shown in place of a directive whose call failed"""
    css = "error" if block else "note"
    return f'<aside class="{css}">[AI Error: {message}]</aside>'


class AIServiceError(RuntimeError):
    """Raised by a completion service that cannot produce a response"""
    pass


class AIService(Protocol):
    """Completion capability injected into the AI pass"""

    enabled: bool

    async def call(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        ...


class DisabledAIService:
    """Service used when AI is switched off; every directive gets the disabled marker"""

    enabled = False

    async def call(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        raise AIServiceError("AI service is disabled")


class OpenRouterService:
    """
    OpenRouter chat completions via litellm

    With ``models`` set, the request asks OpenRouter to route between them
    (``route`` defaults to "cheapest"); otherwise a single ``model`` is used.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        models: Optional[List[str]] = None,
        route: Optional[str] = None,
        site_url: Optional[str] = None,
        enabled: Optional[bool] = None,
        timeout: Optional[float] = None,
    ) -> None:
        from ..config import appsettings

        self.api_key = api_key if api_key is not None else appsettings.ai_api_key
        self.model = model or appsettings.ai_model
        self.models = models if models is not None else appsettings.ai_models
        self.route = route or appsettings.ai_route or ("cheapest" if self.models else None)
        self.site_url = site_url or appsettings.ai_site_url
        self.timeout = timeout if timeout is not None else appsettings.ai_timeout
        wanted = appsettings.ai_enabled if enabled is None else enabled
        self.enabled = bool(wanted and self.api_key)

    def request_build(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Keyword arguments for litellm.acompletion()"""
        options = options or {}
        model = options.get("model") or self.model

        request: Dict[str, Any] = {
            "model": f"openrouter/{model}",
            "messages": [{"role": "user", "content": prompt}],
            "api_key": self.api_key,
            "timeout": self.timeout,
            "extra_headers": {
                "HTTP-Referer": self.site_url,
                "X-Title": "Standard Framework",
            },
        }
        if self.models and not options.get("model"):
            request["extra_body"] = {"models": list(self.models), "route": self.route}
        return request

    async def call(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Request one completion

        Raises:
            AIServiceError: No API key, transport failure, or empty response
        """
        if not self.api_key:
            raise AIServiceError("OpenRouter API key not configured")

        import litellm

        try:
            response = await litellm.acompletion(**self.request_build(prompt, options))
        except Exception as e:
            raise AIServiceError(str(e)) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError):
            content = None
        if not content:
            raise AIServiceError("Invalid response from OpenRouter API")
        return content


def service_fromSettings() -> AIService:
    """The configured completion service, or DisabledAIService when AI is off"""
    from ..config import appsettings

    if not appsettings.ai_enabled:
        return DisabledAIService()
    return OpenRouterService()


def _ai_directives_find(text: str) -> List[Tuple[int, int, bool, str, str]]:
    """
    Locate ::ai directives as (start, end, isBlock, args, body) in document order

    A ``::ai`` line whose tail is empty or only key=value tokens opens a
    block; inline matches falling inside a block are dropped.
    """
    found: List[Tuple[int, int, bool, str, str]] = []
    taken: List[Tuple[int, int]] = []

    position = 0
    while True:
        block = _AI_BLOCK.search(text, position)
        if block is None:
            break
        tail = block.group(1).strip()
        if tail and not args_onlyKeyValues(tail):
            # An inline ::ai line; a block may still open on a later line
            position = block.start() + 1
            continue
        found.append((block.start(), block.end(), True, tail, block.group(2)))
        taken.append((block.start(), block.end()))
        position = block.end()

    for inline in _AI_INLINE.finditer(text):
        if any(start <= inline.start() < end for start, end in taken):
            continue
        found.append((inline.start(), inline.end(), False, inline.group(1).strip(), ""))

    found.sort(key=lambda item: item[0])
    return found


def request_fromDirective(isBlock: bool, args: str, body: str, default_prompt: str) -> Tuple[str, Dict[str, Any]]:
    """Prompt text and call options for one directive"""
    if not isBlock:
        model_match = _MODEL_PREFIX.match(args)
        if model_match:
            return model_match.group(2).strip(), {"model": model_match.group(1)}
        return args, {}

    options: Dict[str, Any] = dict(args_parse(args))
    prompt = body.strip() or args or default_prompt
    return prompt, options


async def ai_resolve(
    text: str,
    service: AIService,
    timeout: Optional[float] = None,
    default_prompt: Optional[str] = None,
    log: Optional[DiagnosticLogger] = None,
) -> str:
    """
    Replace every ::ai directive with its completion

    Args:
        text: Document text before the directive engine runs
        service: Completion service (see AIService)
        timeout: Seconds allowed per call; None uses the configured default
        default_prompt: Prompt for a block with no body and no arguments
        log: Logger receiving per-call failures; None uses loguru's logger

    Returns:
        Text with each directive replaced by its response, an error marker,
        or the disabled marker when the service is not enabled
    """
    from ..config import appsettings

    if "::ai" not in text:
        return text

    timeout = appsettings.ai_timeout if timeout is None else timeout
    default_prompt = default_prompt or appsettings.ai_default_prompt
    log = log if log is not None else logger

    directives = _ai_directives_find(text)
    if not directives:
        return text

    LOG(f"Resolving {len(directives)} ::ai directive(s)", level=2)

    parts: List[str] = []
    cursor = 0
    for start, end, isBlock, args, body in directives:
        parts.append(text[cursor:start])
        cursor = end

        if not service.enabled:
            parts.append(DISABLED_BLOCK if isBlock else DISABLED_INLINE)
            continue

        prompt, options = request_fromDirective(isBlock, args, body, default_prompt)
        try:
            result = await asyncio.wait_for(service.call(prompt, options or None), timeout=timeout)
        except asyncio.TimeoutError:
            log.error(f"AI call timed out after {timeout}s")
            parts.append(errorMarker_make(f"timed out after {timeout}s", isBlock))
            continue
        except Exception as e:
            log.error(f"AI call failed: {e}")
            parts.append(errorMarker_make(str(e), isBlock))
            continue

        parts.append(result if isinstance(result, str) else "")

    parts.append(text[cursor:])
    return "".join(parts)
