from shortener.dao.file.short_url_file_dao import ShortURLFileDAO


__all__ = [
    'ShortURLFileDAO',
]
