"""Unit tests for comic_service using FakeComicWriter."""

import unittest

from adapter.fake.comic_writer import FakeComicWriter
from domain.model.comic import ComicDraft, ComicPatch
from domain.model.errors import ContentStoreError, ValidationError
from domain.model.image import MAX_IMAGE_SIZE, ImageUpload
from services import comic_service


def _image(content_type='image/png', size=1024) -> ImageUpload:
    return ImageUpload(filename='page.png', content_type=content_type, data=b'x' * size)


class TestCreateComic(unittest.IsolatedAsyncioTestCase):
    """Test create_comic validation order and call sequence."""

    async def test_uploads_then_creates(self):
        writer = FakeComicWriter()
        draft = ComicDraft(title='First', slug='first')

        comic_id = await comic_service.create_comic(draft, _image(), writer)

        self.assertEqual(comic_id, 'comic-1')
        self.assertEqual(writer.uploads, [('page.png', 'image/png', 1024)])
        self.assertEqual(writer.created['comic-1'], (draft, 'image-asset1-800x600-png'))

    async def test_missing_title_makes_no_calls(self):
        writer = FakeComicWriter()

        with self.assertRaises(ValidationError) as ctx:
            await comic_service.create_comic(ComicDraft(title='', slug='first'), _image(), writer)

        self.assertEqual(str(ctx.exception), "title and slug are required")
        self.assertEqual(writer.call_count, 0)

    async def test_missing_slug_makes_no_calls(self):
        writer = FakeComicWriter()

        with self.assertRaises(ValidationError):
            await comic_service.create_comic(ComicDraft(title='First', slug=''), _image(), writer)
        self.assertEqual(writer.call_count, 0)

    async def test_bad_image_makes_no_calls(self):
        writer = FakeComicWriter()
        cases = [_image(content_type='image/svg+xml'), _image(size=MAX_IMAGE_SIZE + 1)]

        for image in cases:
            with self.subTest(content_type=image.content_type, size=image.size):
                with self.assertRaises(ValidationError):
                    await comic_service.create_comic(ComicDraft(title='t', slug='s'), image, writer)
        self.assertEqual(writer.call_count, 0)

    async def test_create_failure_leaves_upload(self):
        writer = FakeComicWriter(fail_on='create_comic')

        with self.assertRaises(ContentStoreError):
            await comic_service.create_comic(ComicDraft(title='t', slug='s'), _image(), writer)

        self.assertEqual(len(writer.uploads), 1, "uploaded asset is not cleaned up")

    async def test_upload_failure_skips_create(self):
        writer = FakeComicWriter(fail_on='upload_image')

        with self.assertRaises(ContentStoreError):
            await comic_service.create_comic(ComicDraft(title='t', slug='s'), _image(), writer)
        self.assertEqual(writer.created, {})


class TestPatchComic(unittest.IsolatedAsyncioTestCase):

    async def test_patch_without_image(self):
        writer = FakeComicWriter()
        patch = ComicPatch(hidden=True)

        self.assertEqual(await comic_service.patch_comic('comic-9', patch, writer), 'comic-9')
        self.assertEqual(writer.uploads, [])
        self.assertEqual(writer.patches, [('comic-9', patch, None)])

    async def test_patch_with_image_uploads_first(self):
        writer = FakeComicWriter()

        await comic_service.patch_comic('comic-9', ComicPatch(), writer, image=_image())

        self.assertEqual(writer.patches[0][2], 'image-asset1-800x600-png')

    async def test_invalid_image_rejected_before_any_call(self):
        writer = FakeComicWriter()

        with self.assertRaises(ValidationError):
            await comic_service.patch_comic('comic-9', ComicPatch(), writer, image=_image(content_type='text/plain'))
        self.assertEqual(writer.call_count, 0)


class TestDeleteComic(unittest.IsolatedAsyncioTestCase):

    async def test_delete(self):
        writer = FakeComicWriter()
        self.assertEqual(await comic_service.delete_comic('comic-3', writer), 'comic-3')
        self.assertEqual(writer.deleted, ['comic-3'])

    async def test_delete_failure_propagates(self):
        with self.assertRaises(ContentStoreError):
            await comic_service.delete_comic('comic-3', FakeComicWriter(fail_on='delete_comic'))


if __name__ == '__main__':
    unittest.main()
