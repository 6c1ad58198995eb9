"""Tests for JSON export of mapped products."""

import json

from conftest import PRODUCT_FULL, RATING_FULL
from tnf_scrape.mapper import map_all
from tnf_scrape.models import ProductMapped, StarRating
from tnf_scrape.output import output_path_for, save_products_to_json, serialize_products


class TestSerializeProducts:
    def test_pascal_case_keys(self):
        data = json.loads(serialize_products(map_all(PRODUCT_FULL, RATING_FULL)))

        assert len(data) == 2
        first = data[0]
        assert first["Sku"] == "id123$color=RED&size=S"
        assert first["RootDomain"] == "thenorthface.com"
        assert first["StarRatingDistribution"]["3 Star"] == {"Number": 3, "Percentage": 25.0}
        assert first["VariantAttributes"] == {"Color": "Red", "Size": "Small"}
        assert first["VariantsAttributes"][1] == {"id123$color=BLU&size=L": {"Color": "Blue", "Size": "Large"}}
        assert json.loads(first["Features"]) == ["Waterproof", "Breathable"]

    def test_unicode_and_slashes_not_escaped(self):
        product = ProductMapped(name="Größe Jacke", url="https://www.thenorthface.com/en-us/p/-x")
        text = serialize_products([product])

        assert "Größe Jacke" in text
        assert "https://www.thenorthface.com/en-us/p/-x" in text
        assert "\\u" not in text

    def test_indented(self):
        text = serialize_products([ProductMapped(sku="a")])
        assert text.startswith("[\n  {\n    \"Sku\": \"a\"")

    def test_empty_list(self):
        assert serialize_products([]) == "[]"

    def test_star_rating_to_dict(self):
        assert StarRating(number=2, percentage=16.7).to_dict() == {"Number": 2, "Percentage": 16.7}


class TestSaveProductsToJson:
    def test_creates_directory_and_file(self, tmp_path):
        out_dir = tmp_path / "nested" / "outputs"
        path = save_products_to_json([ProductMapped(sku="solo1")], "solo1", out_dir)

        assert path == out_dir / "solo1.json"
        assert json.loads(path.read_text(encoding="utf-8"))[0]["Sku"] == "solo1"

    def test_output_path(self, tmp_path):
        assert output_path_for("NF0A3C8D", tmp_path) == tmp_path / "NF0A3C8D.json"
