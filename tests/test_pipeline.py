"""
Two-phase transform tests

The AI pass runs over the original text, then the directive engine runs
over its output.
"""

import pytest

from layoutsyntax.lib.ai import DisabledAIService
from layoutsyntax.lib.engine import DirectiveEngine
from layoutsyntax.lib.pipeline import content_transform, content_transformSync


class EchoService:
    """Service answering with directive markup"""

    enabled = True

    def __init__(self, answer):
        self.answer = answer
        self.prompts = []

    async def call(self, prompt, options=None):
        self.prompts.append(prompt)
        return self.answer


class TestTransform:
    """Test the combined passes"""

    @pytest.mark.asyncio
    async def test_ai_output_processed_by_engine(self, recording_log):
        """Completion text containing directives is expanded"""
        engine = DirectiveEngine(log=recording_log)
        service = EchoService("::note Generated")

        result = await content_transform("::ai write a note", {}, engine=engine, service=service)

        assert result == '<aside class="note">Generated</aside>'
        assert service.prompts == ["write a note"]

    @pytest.mark.asyncio
    async def test_ai_inside_layout(self, recording_log):
        """AI blocks resolve before the layout that contains them"""
        engine = DirectiveEngine(log=recording_log)
        service = EchoService("Answer")
        text = "::columns 2\n::ai\nQuestion?\n::end\n---\nRight\n::end"

        result = await content_transform(text, {}, engine=engine, service=service)

        assert service.prompts == ["Question?"]
        assert "Answer" in result
        assert result.count("md:col-6") == 2

    @pytest.mark.asyncio
    async def test_preprocess_flag(self, recording_log):
        """Cleanup passes run first when asked"""
        engine = DirectiveEngine(log=recording_log)
        text = "%%hidden ::note x%%::if featured\n==Hi==\n::end"

        result = await content_transform(
            text, {"featured": True}, engine=engine, service=DisabledAIService(), preprocess=True
        )

        assert result == "\n<mark>Hi</mark>\n"

    @pytest.mark.asyncio
    async def test_page_data_not_mutated(self, recording_log):
        """Date normalisation works on a copy"""
        data = {"created": "2024-01-02 03:04"}
        engine = DirectiveEngine(log=recording_log)

        await content_transform("text", data, engine=engine, service=DisabledAIService(), preprocess=True)

        assert data == {"created": "2024-01-02 03:04"}

    def test_sync_wrapper(self, recording_log):
        """Blocking wrapper gives the same result"""
        engine = DirectiveEngine(log=recording_log)

        result = content_transformSync("::ai hi", {}, engine=engine, service=DisabledAIService())

        assert result == '<aside class="note">[AI disabled]</aside>'
