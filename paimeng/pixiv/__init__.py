"""Pixiv picture information and HibiAPI illustration parsing."""