from __future__ import annotations

import random
from typing import List, Optional

# Azure neural voices per language:
# https://learn.microsoft.com/en-us/azure/cognitive-services/speech-service/language-support?tabs=tts

ENGLISH_NARRATOR_VOICE = "en-GB-AbbiNeural"


class Language:
	def __init__(self, code: str, readable: str, male_voices: List[str], female_voices: List[str]) -> None:
		self.code = code
		self.readable = readable
		self.male_voices = male_voices
		self.female_voices = female_voices

	def random_voice_for_gender(self, gender: str) -> str:
		normalized = gender.lower()
		if normalized == "male":
			return random.choice(self.male_voices)
		if normalized == "female":
			return random.choice(self.female_voices)
		raise ValueError(f"Unexpected gender: {gender}")

	def __repr__(self) -> str:
		return f"Language({self.code!r})"


ITALIAN = Language(
	"it",
	"Italian",
	[
		"it-IT-BenignoNeural",
		"it-IT-CalimeroNeural",
		"it-IT-CataldoNeural",
		"it-IT-DiegoNeural",
		"it-IT-GianniNeural",
		"it-IT-LisandroNeural",
		"it-IT-RinaldoNeural",
	],
	[
		"it-IT-ElsaNeural",
		"it-IT-FabiolaNeural",
		"it-IT-FiammaNeural",
		"it-IT-ImeldaNeural",
		"it-IT-IrmaNeural",
		"it-IT-IsabellaNeural",
		"it-IT-PalmiraNeural",
		"it-IT-PierinaNeural",
	],
)

SPANISH_SPAIN = Language(
	"es-ES",
	"Spanish",
	[
		"es-ES-AlvaroNeural",
		"es-ES-ArnauNeural",
		"es-ES-DarioNeural",
		"es-ES-EliasNeural",
		"es-ES-NilNeural",
		"es-ES-SaulNeural",
		"es-ES-TeoNeural",
	],
	[
		"es-ES-AbrilNeural",
		"es-ES-ElviraNeural",
		"es-ES-EstrellaNeural",
		"es-ES-IreneNeural",
		"es-ES-LaiaNeural",
		"es-ES-LiaNeural",
		"es-ES-TrianaNeural",
		"es-ES-VeraNeural",
	],
)

GERMAN = Language(
	"de-DE",
	"German",
	[
		"de-DE-BerndNeural",
		"de-DE-ChristophNeural",
		"de-DE-ConradNeural",
		"de-DE-KasperNeural",
		"de-DE-KillianNeural",
		"de-DE-KlausNeural",
		"de-DE-RalfNeural",
	],
	[
		"de-DE-AmalaNeural",
		"de-DE-ElkeNeural",
		"de-DE-GiselaNeural",
		"de-DE-KatjaNeural",
		"de-DE-KlarissaNeural",
		"de-DE-LouisaNeural",
		"de-DE-MajaNeural",
		"de-DE-TanjaNeural",
	],
)

PORTUGUESE_PORTUGAL = Language(
	"pt-PT",
	"Portuguese",
	["pt-PT-DuarteNeural"],
	["pt-PT-FernandaNeural", "pt-PT-RaquelNeural"],
)

LANGUAGES: List[Language] = [GERMAN, ITALIAN, SPANISH_SPAIN, PORTUGUESE_PORTUGAL]


def get_language(code: Optional[str]) -> Optional[Language]:
	for language in LANGUAGES:
		if language.code == code:
			return language
	return None
