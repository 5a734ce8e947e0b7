"""
受限词存储

负责受限词的增删改查：所有词统一转小写后存储并保持唯一，
读取接口带进程内缓存，任何修改都会整体失效缓存。
"""
import logging
import threading
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from src.db import RestrictedWord

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """存储层失败（连接不可用、约束冲突等），原始异常保存在 __cause__"""


def normalize(word: str) -> str:
    return word.lower()


class WordSetCache:
    """
    受限词集合缓存
    每次失效都会递增 generation；读取开始前记下 generation，
    写回时若已被失效过则丢弃，避免把修改前的旧集合重新放回缓存
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._words: Optional[frozenset[str]] = None
        self._generation = 0

    def get(self) -> Optional[frozenset[str]]:
        with self._lock:
            return self._words

    def generation(self) -> int:
        with self._lock:
            return self._generation

    def put(self, words: frozenset[str], generation: int) -> bool:
        """
        写入缓存
        Args:
            words: 从数据库读出的完整词集合
            generation: 读取开始前的 generation
        Returns:
            bool: 是否写入成功（期间发生过失效则为 False）
        """
        with self._lock:
            if generation != self._generation:
                return False
            self._words = words
            return True

    def invalidate(self) -> None:
        with self._lock:
            self._words = None
            self._generation += 1


class RestrictedWordStore:
    """
    受限词存储，基于 SQLAlchemy 会话工厂
    未找到 / 已存在通过 None、False 返回，真正的存储失败抛 StoreError
    """

    def __init__(self, session_factory: sessionmaker, cache: Optional[WordSetCache] = None):
        self._session_factory = session_factory
        self.cache = cache if cache is not None else WordSetCache()

    def list(self) -> frozenset[str]:
        """
        返回全部受限词（小写），命中缓存时不访问数据库
        Returns:
            frozenset[str]: 受限词集合
        """
        cached = self.cache.get()
        if cached is not None:
            return cached

        generation = self.cache.generation()
        try:
            with self._session_factory() as session:
                rows = session.scalars(select(RestrictedWord.word)).all()
        except SQLAlchemyError as e:
            raise StoreError("Error fetching words") from e

        words = frozenset(normalize(w) for w in rows)
        if not self.cache.put(words, generation):
            logger.debug("word set changed while loading, cache not populated")
        return words

    def add(self, word: str) -> Optional[RestrictedWord]:
        """
        新增受限词；归一化后已存在则不做任何事并返回 None
        Args:
            word: 待新增的词（任意大小写）
        Returns:
            Optional[RestrictedWord]: 新建的实体，已存在时为 None
        """
        normalized = normalize(word)
        try:
            with self._session_factory.begin() as session:
                if self._find(session, normalized) is not None:
                    return None
                entry = RestrictedWord(word=normalized)
                session.add(entry)
                session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Error adding word: {word}") from e
        finally:
            self.cache.invalidate()

        logger.info("restricted word added: %s", normalized)
        return entry

    def update(self, old_word: str, new_word: str) -> Optional[RestrictedWord]:
        """
        把 old_word 改为 new_word，保留原记录 id
        不检查 new_word 是否与其他词冲突，冲突时由唯一约束报错并包装为 StoreError
        Returns:
            Optional[RestrictedWord]: 更新后的实体，old_word 不存在时为 None
        """
        normalized_old = normalize(old_word)
        normalized_new = normalize(new_word)
        try:
            with self._session_factory.begin() as session:
                entry = self._find(session, normalized_old)
                if entry is None:
                    return None
                entry.word = normalized_new
                session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Error updating word from {old_word} to {new_word}") from e
        finally:
            self.cache.invalidate()

        logger.info("restricted word updated: %s -> %s", normalized_old, normalized_new)
        return entry

    def delete(self, word: str) -> bool:
        """删除受限词，返回是否确实删除了记录"""
        normalized = normalize(word)
        try:
            with self._session_factory.begin() as session:
                entry = self._find(session, normalized)
                if entry is None:
                    return False
                session.delete(entry)
        except SQLAlchemyError as e:
            raise StoreError(f"Error deleting word: {word}") from e
        finally:
            self.cache.invalidate()

        logger.info("restricted word deleted: %s", normalized)
        return True

    @staticmethod
    def _find(session, normalized: str) -> Optional[RestrictedWord]:
        return session.scalars(
            select(RestrictedWord).where(RestrictedWord.word == normalized)
        ).first()
