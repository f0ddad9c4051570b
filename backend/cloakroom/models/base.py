import time
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """現在時刻（エポックミリ秒）"""
    return int(time.time() * 1000)


class Document(BaseModel):
    """ストアに保存されるドキュメントの基底クラス。JSON は camelCase で入出力する。"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def public(self, exclude=None) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude=exclude, exclude_none=True)
