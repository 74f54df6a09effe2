from pathlib import Path

import pytest

from wikisite.parser import PageAttributes

IMAGE_BYTES = b"RIFF\x00\x00\x00\x00WEBPVP8 fake image"


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def docs(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    write(root / "example.md", "---\ndescription: An example page\n---\n\n# Example Title\n\nSee [[Nested]].\n")
    write(
        root / "second level" / "nested.md",
        "---\npublish: true\n---\n\n# hi\n\nBack to [[Example]].\n",
    )
    write(root / "second level" / "nested with space.md", "Just some text.\n")
    (root / "assets").mkdir(parents=True, exist_ok=True)
    (root / "assets" / "testImage.webp").write_bytes(IMAGE_BYTES)
    (root / "second level" / "assets").mkdir(parents=True, exist_ok=True)
    (root / "second level" / "assets" / "testImage.webp").write_bytes(IMAGE_BYTES)
    return root


@pytest.fixture
def out(tmp_path: Path) -> Path:
    return tmp_path / "dist"


@pytest.fixture
def make_page(tmp_path: Path):
    def factory(name: str = "example", folder: str = "", **overrides) -> PageAttributes:
        input_root = tmp_path / "docs"
        output_root = tmp_path / "dist"
        output_folder = output_root / folder if folder else output_root
        values = dict(
            title=name.title(),
            description=f"A page about {name}",
            content="<p>Hello World</p>",
            page_front_matter={},
            input_file=(input_root / folder / f"{name}.md") if folder else input_root / f"{name}.md",
            input_folder=input_root,
            output_file_folder=output_folder,
            output_file_name=f"{name}.html",
            output_file_path=output_folder / f"{name}.html",
        )
        values.update(overrides)
        return PageAttributes(**values)

    return factory
