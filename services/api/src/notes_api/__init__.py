"""笔记服务接口包。"""
