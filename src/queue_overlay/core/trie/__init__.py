from .trie import SchedulerConfigTrie, TrieNode

__all__ = ["SchedulerConfigTrie", "TrieNode"]
