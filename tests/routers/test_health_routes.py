def test_info(api):
	body = api.get("/info").json()
	assert body["status"] == "ok"
	assert set(body) >= {"openai_configured", "speech_configured", "storage_configured", "live_sessions"}


def test_robots(api):
	r = api.get("/robots.txt")
	assert r.status_code == 200
	assert r.text == "User-agent: *\nDisallow: /"
