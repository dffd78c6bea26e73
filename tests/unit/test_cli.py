"""Unit tests for the command-line interface."""

import json

import pytest
import yaml

from outfitmatch.cli import main, parse_args

CATALOG_CSV = (
    "id,brand,name,category,price_range,image_url,style_tags,colors,in_stock,product_url,embedding\n"
    'a,Acme,East Tee,tops,$,https://x/a.jpg,casual,white,true,,"[1,0]"\n'
    'b,Acme,North Tee,tops,$,https://x/b.jpg,casual,black,true,,"[0,1]"\n'
)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.dump({
            "recommendation": {"embedding_dim": 2, "match_threshold": 0.5},
            "database": {"backend": "memory"},
            "log_level": "WARNING",
        }, f)
    return path


@pytest.fixture
def chroma_config_file(tmp_path):
    path = tmp_path / "chroma_config.yaml"
    with open(path, "w") as f:
        yaml.dump({
            "recommendation": {"embedding_dim": 2, "match_threshold": 0.5},
            "database": {"backend": "chroma", "persist_directory": str(tmp_path / "chroma")},
            "log_level": "WARNING",
        }, f)
    return path


@pytest.fixture
def catalog_csv(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text(CATALOG_CSV, encoding="utf-8")
    return path


def test_parse_recommend_args():
    """Test recommend options."""
    args = parse_args(["recommend", "outfits.json", "--threshold", "0.7", "--limit", "3"])

    assert args.command == "recommend"
    assert args.threshold == 0.7
    assert args.limit == 3


def test_command_required():
    """Test a subcommand must be given."""
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.asyncio
async def test_import_catalog(chroma_config_file, catalog_csv, capsys):
    """Test import prints a summary."""
    exit_code = await main(["--config", str(chroma_config_file), "import-catalog", str(catalog_csv)])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "Imported: 2" in output
    assert "Store now holds 2 items" in output


@pytest.mark.asyncio
async def test_import_requires_embeddings(chroma_config_file, tmp_path, capsys):
    """Test rows without embeddings abort the import."""
    csv_path = tmp_path / "raw.csv"
    csv_path.write_text("brand,name,image_url\nAcme,Plain Tee,https://x/p.jpg\n", encoding="utf-8")

    exit_code = await main(["--config", str(chroma_config_file), "import-catalog", str(csv_path)])

    assert exit_code == 1
    assert "no embedding" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_import_refuses_memory_backend(config_file, catalog_csv, capsys):
    """Test import into the throwaway memory store is refused."""
    exit_code = await main(["--config", str(config_file), "import-catalog", str(catalog_csv)])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "persistent backend" in output
    assert "IMPORT SUMMARY" not in output


@pytest.mark.asyncio
async def test_recommend(config_file, catalog_csv, tmp_path, capsys):
    """Test ranked output for a list of embeddings."""
    embeddings = tmp_path / "outfits.json"
    embeddings.write_text(json.dumps([[1.0, 0.1], "[0.9,0.0]"]))

    exit_code = await main([
        "--config", str(config_file),
        "recommend", str(embeddings),
        "--catalog", str(catalog_csv),
        "--threshold", "0.9",
    ])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "East Tee (a)" in output
    assert "North Tee" not in output
    assert "(fallback)" not in output


@pytest.mark.asyncio
async def test_recommend_fallback(config_file, catalog_csv, tmp_path, capsys):
    """Test fallback is flagged when no embedding is usable."""
    embeddings = tmp_path / "outfits.json"
    embeddings.write_text(json.dumps(["broken"]))

    exit_code = await main([
        "--config", str(config_file),
        "recommend", str(embeddings),
        "--catalog", str(catalog_csv),
    ])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "(fallback)" in output
    assert "Reason: no_valid_embeddings" in output


@pytest.mark.asyncio
async def test_invalid_threshold(config_file, tmp_path, capsys):
    """Test caller errors exit with status 1."""
    embeddings = tmp_path / "outfits.json"
    embeddings.write_text("[[1.0, 0.0]]")

    exit_code = await main(["--config", str(config_file), "recommend", str(embeddings), "--threshold", "4"])

    assert exit_code == 1
    assert "Threshold" in capsys.readouterr().out
