"""
gouse - Go 版本切换工具。

通过重写 bin 目录中的 go 符号链接在多个 Go 版本之间切换，
按需通过 golang.org/dl 安装版本并下载 SDK。
"""

__version__ = "0.1.0"
