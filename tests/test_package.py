import typing

import apeisland
from apeisland.advice.store import AdviceRuleStore
from apeisland.advice.types import AdviceRule


def test_package_imports_and_exports():
    assert apeisland.__version__ == "0.1.0"
    for name in apeisland.__all__:
        assert getattr(apeisland, name) is not None


def test_store_annotations_resolve():
    assert typing.get_type_hints(AdviceRuleStore.rules)["return"] == list[AdviceRule]
    assert typing.get_type_hints(AdviceRuleStore.texts)["return"] == list[str]
