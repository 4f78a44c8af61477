# -*- coding: utf-8 -*-

import sys
import logging


LOGGER_NAME = "rawtar"


def getlogger(level=logging.WARNING, name=LOGGER_NAME):
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(filename)s:%(lineno)d %(message)s", datefmt="%Y-%m-%d-%H:%M:%S")
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(fmt)
    logger = logging.getLogger(name)
    # 使用传入的 level，并防止重复添加 handler 和向上传播
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(stream)
    logger.propagate = False
    return logger


logger = getlogger()
