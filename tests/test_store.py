from conftest import make_character

from parlance import store
from parlance.languages import GERMAN, ITALIAN
from parlance.schemas import Answer, ConversationDocument, ConversationPart, Question


def _document(**overrides) -> ConversationDocument:
	fields = dict(
		characters=[make_character("Giulia", "it-IT-ElsaNeural"), make_character("Marco", "it-IT-DiegoNeural")],
		parts=[ConversationPart(name="Giulia", text="Ciao"), ConversationPart(name="Marco", text="Salve")],
		questions=[Question(question="Chi saluta?", answers=[Answer(answer="Giulia", is_correct=True), Answer(answer="Luca", is_correct=False)])],
		audio="https://blob.example/audio.mp3",
		location="Beach",
		title="Hello at the beach",
		language_code="it",
		length="short",
	)
	fields.update(overrides)
	return ConversationDocument(**fields)


def test_insert_and_fetch_characters_by_language(db):
	store.insert_character(db, make_character("Giulia", "it-IT-ElsaNeural"))
	store.insert_character(db, make_character("Hans", "de-DE-KlausNeural", language="de-DE"))

	italian = store.get_characters_for_language(db, ITALIAN)

	assert [c.name for c in italian] == ["Giulia"]
	assert italian[0].language_config.voice == "it-IT-ElsaNeural"
	assert italian[0].avatar_url == "https://blob.example/Giulia.png"
	assert store.get_random_character(db, GERMAN).name == "Hans"


def test_random_character_none_when_empty(db):
	assert store.get_random_character(db, ITALIAN) is None


def test_conversation_round_trip(db):
	document = _document()
	conversation_id = store.insert_conversation(db, document)

	assert store.get_conversation(db, conversation_id) == document
	assert store.get_conversation(db, "missing") is None


def test_random_conversation_id(db):
	assert store.get_random_conversation_id(db) is None
	conversation_id = store.insert_conversation(db, _document())
	assert store.get_random_conversation_id(db) == conversation_id


def test_list_conversations_is_compressed(db):
	first = store.insert_conversation(db, _document(title="One"))
	second = store.insert_conversation(db, _document(title="Two", length="long"))

	listed = store.list_conversations(db)

	assert {c.id for c in listed} == {first, second}
	by_id = {c.id: c for c in listed}
	assert by_id[second].length == "long"
	assert by_id[first].language == "it"
	assert by_id[first].audio == "https://blob.example/audio.mp3"
	assert [c.name for c in by_id[first].characters] == ["Giulia", "Marco"]
	assert not hasattr(by_id[first], "parts")
