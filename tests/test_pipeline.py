import asyncio

import pytest
from conftest import FakeOpenAIClient, make_character, scripted_responder

from parlance import openai_client as params
from parlance import pipeline, store
from parlance.errors import NotEnoughCharactersError, UpstreamError
from parlance.languages import ITALIAN
from parlance.schemas import CONVERSATION_TYPES, ChatMessage, get_conversation_type


@pytest.fixture
def characters(db):
	store.insert_character(db, make_character("Giulia", "it-IT-ElsaNeural"))
	store.insert_character(db, make_character("Marco", "it-IT-DiegoNeural", gender="male"))


@pytest.fixture
def audio_calls():
	calls = []

	async def fake_audio(characters, parts):
		calls.append((list(characters), list(parts)))
		return "https://blob.example/audio/audio-x.mp3"

	return calls, fake_audio


def test_choose_character_pair_differs_in_name_and_voice():
	candidates = [
		make_character("Giulia", "it-IT-ElsaNeural"),
		make_character("Giulia", "it-IT-IrmaNeural"),
		make_character("Sara", "it-IT-ElsaNeural"),
		make_character("Marco", "it-IT-DiegoNeural"),
	]
	for _ in range(50):
		first, second = pipeline.choose_character_pair(candidates)
		assert first.name != second.name
		assert first.language_config.voice != second.language_config.voice


@pytest.mark.parametrize(
	"candidates",
	[
		[],
		[make_character("Giulia", "it-IT-ElsaNeural")],
		[make_character("Giulia", "it-IT-ElsaNeural"), make_character("Giulia", "it-IT-IrmaNeural")],
		[make_character("Giulia", "it-IT-ElsaNeural"), make_character("Sara", "it-IT-ElsaNeural")],
	],
)
def test_choose_character_pair_without_valid_pair(candidates):
	with pytest.raises(NotEnoughCharactersError):
		pipeline.choose_character_pair(candidates)


@pytest.mark.asyncio
@pytest.mark.parametrize("tier", CONVERSATION_TYPES, ids=lambda t: t.param)
async def test_pipeline_requests_tier_counts(db, characters, audio_calls, tier):
	client = FakeOpenAIClient(scripted_responder())
	calls, fake_audio = audio_calls

	document = await pipeline.generate_full_conversation(db, client, ITALIAN, tier, audio_generator=fake_audio)

	conversation_call = next(m for p, m in client.calls if p is params.GENERATE_CONVERSATION)
	assert f"MUST be exactly {tier.turn_count} turns long" in conversation_call[-1].content
	questions_call = next(m for p, m in client.calls if p is params.GENERATE_QUESTIONS)
	assert f"exactly {tier.question_count} questions" in questions_call[0].content
	assert len(document.questions) == tier.question_count
	assert all(sum(a.is_correct for a in q.answers) == 1 for q in document.questions)
	assert document.length == tier.param
	assert document.language_code == "it"


@pytest.mark.asyncio
async def test_pipeline_assembles_and_persists(db, characters, audio_calls):
	client = FakeOpenAIClient(scripted_responder())
	calls, fake_audio = audio_calls

	document = await pipeline.generate_full_conversation(db, client, ITALIAN, get_conversation_type("short"), audio_generator=fake_audio)

	assert [p for p, _ in client.calls][0] is params.GENERATE_CONVERSATION
	assert {p for p, _ in client.calls[1:]} == {params.GENERATE_QUESTIONS, params.PARSE_CONVERSATION}
	assert document.title == "At the seaside"
	assert document.location == "Beach"
	assert document.audio == "https://blob.example/audio/audio-x.mp3"
	assert {c.name for c in document.characters} == {"Giulia", "Marco"}
	assert [p.name for p in calls[0][1]] == ["Giulia", "Marco"]
	stored = store.list_conversations(db)
	assert len(stored) == 1
	assert store.get_conversation(db, stored[0].id) == document


@pytest.mark.asyncio
@pytest.mark.parametrize("fail_on", [params.GENERATE_CONVERSATION, params.GENERATE_QUESTIONS, params.PARSE_CONVERSATION])
async def test_pipeline_upstream_failure_persists_nothing(db, characters, audio_calls, fail_on):
	client = FakeOpenAIClient(scripted_responder(fail_on=fail_on))
	calls, fake_audio = audio_calls

	with pytest.raises(UpstreamError):
		await pipeline.generate_full_conversation(db, client, ITALIAN, get_conversation_type("short"), audio_generator=fake_audio)

	assert calls == []
	assert store.list_conversations(db) == []


@pytest.mark.asyncio
async def test_pipeline_unparseable_conversation_is_upstream_error(db, characters, audio_calls):
	client = FakeOpenAIClient(scripted_responder(parse_output="not json at all"))
	calls, fake_audio = audio_calls

	with pytest.raises(UpstreamError):
		await pipeline.generate_full_conversation(db, client, ITALIAN, get_conversation_type("short"), audio_generator=fake_audio)
	assert store.list_conversations(db) == []


@pytest.mark.asyncio
async def test_pipeline_audio_failure_persists_nothing(db, characters):
	client = FakeOpenAIClient(scripted_responder())

	async def failing_audio(characters, parts):
		raise UpstreamError("tts down")

	with pytest.raises(UpstreamError):
		await pipeline.generate_full_conversation(db, client, ITALIAN, get_conversation_type("short"), audio_generator=failing_audio)
	assert store.list_conversations(db) == []


@pytest.mark.asyncio
async def test_pipeline_needs_two_characters(db):
	store.insert_character(db, make_character("Giulia", "it-IT-ElsaNeural"))
	client = FakeOpenAIClient(scripted_responder())

	with pytest.raises(NotEnoughCharactersError):
		await pipeline.generate_full_conversation(db, client, ITALIAN, get_conversation_type("short"))
	assert client.calls == []


@pytest.mark.asyncio
async def test_pipeline_runs_questions_and_parse_concurrently(db, characters, audio_calls):
	respond = scripted_responder()
	fanned_out = asyncio.Event()
	waiting = []

	class FanOutClient(FakeOpenAIClient):
		async def chat(self, p, messages):
			messages = list(messages)
			if p in (params.GENERATE_QUESTIONS, params.PARSE_CONVERSATION):
				waiting.append(p)
				if len(waiting) == 2:
					fanned_out.set()
				await asyncio.wait_for(fanned_out.wait(), timeout=1)
			return ChatMessage(role="assistant", content=respond(p, messages))

	_, fake_audio = audio_calls
	document = await pipeline.generate_full_conversation(
		db, FanOutClient(respond), ITALIAN, get_conversation_type("short"), audio_generator=fake_audio
	)

	assert set(waiting) == {params.GENERATE_QUESTIONS, params.PARSE_CONVERSATION}
	assert len(document.questions) == 3
