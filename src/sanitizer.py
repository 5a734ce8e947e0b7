"""
受限词脱敏

把文本中独立出现的受限词替换为等长的 * 串：
- 所有词合并为一个正则交替式，按长度降序排列，长词优先命中
- 每个词两侧加单词边界断言，class 不会因为 ass 被误伤
- 忽略大小写，掩码长度取实际命中文本的字符数
"""
import logging
import re
from functools import lru_cache
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)

MASK_CHAR = "*"


class FilterError(Exception):
    """脱敏流程失败，原始异常保存在 __cause__"""


class WordSource(Protocol):
    def list(self) -> frozenset[str]: ...


def build_pattern(words: Iterable[str]) -> re.Pattern[str] | None:
    """
    根据受限词构建正则
    Args:
        words: 受限词（已小写）
    Returns:
        re.Pattern | None: 编译好的交替式；没有可用词时为 None
    """
    return _compile(frozenset(w for w in words if w))


@lru_cache(maxsize=16)
def _compile(words: frozenset[str]) -> re.Pattern[str] | None:
    if not words:
        return None
    # 长度降序，同长按字母序，保证同一词集得到同一正则
    ordered = sorted(words, key=lambda w: (-len(w), w))
    alternation = "|".join(rf"(?<!\w){re.escape(w)}(?!\w)" for w in ordered)
    logger.debug("compiled pattern for %d restricted words", len(ordered))
    return re.compile(alternation, re.IGNORECASE)


def mask_text(text: str, pattern: re.Pattern[str], mask: str = MASK_CHAR) -> str:
    """把所有命中替换为等长掩码"""
    # 掩码必须是单个字符，否则输出长度会偏离输入
    if len(mask) != 1:
        raise ValueError(f"mask must be a single character, got {mask!r}")
    return pattern.sub(lambda m: mask * len(m.group(0)), text)


class WordSanitizer:
    """
    脱敏器，每次调用都从词源读取当前词集合（词源自带缓存）
    """

    def __init__(self, source: WordSource, mask: str = MASK_CHAR):
        if len(mask) != 1:
            raise ValueError(f"mask must be a single character, got {mask!r}")
        self._source = source
        self._mask = mask

    def sanitize(self, text: str) -> str:
        """
        对文本做受限词脱敏
        Args:
            text: 待处理文本
        Returns:
            str: 脱敏后的文本，长度与输入一致
        Raises:
            FilterError: 读取词集合或匹配过程中出现任何异常
        """
        if not text:
            return text
        try:
            pattern = build_pattern(self._source.list())
            if pattern is None:
                return text
            return mask_text(text, pattern, self._mask)
        except Exception as e:
            raise FilterError("Error sanitizing words") from e
