import io
import logging
import os

from PIL import Image, UnidentifiedImageError


logger = logging.getLogger(__name__)


def get_cover_image(ncm):
    '''The cover as a PIL image, None when the container has no cover.'''
    cover = ncm.cover.value
    if cover is None or cover.length == 0:
        return None

    try:
        image = Image.open(io.BytesIO(cover.data))
    except UnidentifiedImageError:
        logger.warning(f'cover of \'{ncm.path}\' is not a known image format')
        return None

    return image


def get_cover_extension(ncm):
    image = get_cover_image(ncm)
    if image is None or image.format is None:
        return '.bin'

    return '.%s' % {'JPEG': 'jpg'}.get(image.format, image.format.lower())


def dump_sections(ncm, directory):
    '''Write each extracted section in its own file inside directory,
    returning the paths written.'''
    os.makedirs(directory, exist_ok=True)

    paths = []
    for name, section in ncm.sections.items():
        ext = get_cover_extension(ncm) if name == 'cover' else '.bin'
        path = os.path.join(directory, name + ext)

        logger.debug(f'writing {section.length} bytes to \'{path}\'')
        with open(path, 'wb') as f:
            f.write(section.data)

        paths.append(path)

    return paths
