"""
dmg-core: Sharp LR35902 (DMG) 命令実行・メモリバスコア。
"""
__version__ = "0.1.0"
