"""
Advanced configuration: proxies, chunk size, status lines, timeouts
"""
import asyncio
import logging

from spupload import ClientConfig, SharePointUploadError, SharePointUploader, TimeoutConfig, setup_logging

FOLDER_URL = "https://contoso.sharepoint.com/sites/team/Shared Documents"


async def main():
    logging.basicConfig(format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    setup_logging(logging.INFO)

    config = ClientConfig.with_proxy(
        "http://proxy.corp.local:3128",
        chunk_size=8 * 1024 * 1024,
        timeout=TimeoutConfig(total=300)
    )

    # Pre-issued bearer token; a verbose uploader prints a line per chunk
    async with SharePointUploader(
        FOLDER_URL,
        {'access_token': "eyJ0eXAiOiJKV1Qi..."},
        verbose=True,
        logger=print,
        config=config
    ) as sp:
        try:
            await sp.upload("backup.tar.gz", timeout=3600)
        except SharePointUploadError as e:
            print(f"Failed at {e.step}: {e}")
        except asyncio.TimeoutError:
            print("Upload took longer than an hour")


if __name__ == "__main__":
    asyncio.run(main())
