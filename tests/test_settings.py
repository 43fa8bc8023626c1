from pathlib import Path

from blogposts.settings import Settings, choose_env_file


def test_defaults():
    s = Settings()

    assert s.POSTS_DIR == "content/posts"
    assert s.POST_EXTENSIONS == (".md", ".markdown")
    assert s.WORDS_PER_MINUTE == 200
    assert s.REQUIRE_TIMEZONE is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("POSTS_DIR", "/srv/blog/posts")
    monkeypatch.setenv("DUPLICATE_THRESHOLD", "0.5")
    monkeypatch.setenv("REQUIRE_TIMEZONE", "false")

    s = Settings()

    assert s.posts_path == Path("/srv/blog/posts")
    assert s.DUPLICATE_THRESHOLD == 0.5
    assert s.REQUIRE_TIMEZONE is False


def test_images_url_strips_trailing_slash():
    s = Settings(BLOG_API_URL="https://blog.example.com/api/")

    assert s.images_url == "https://blog.example.com/api/images"


def test_choose_env_file_prefers_env_local(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: str(self) == ".env.local")
    assert choose_env_file() == ".env.local"


def test_choose_env_file_falls_back(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: False)
    assert choose_env_file() == ".env"
