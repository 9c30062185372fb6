"""
Upload files to SharePoint
"""
import asyncio
import os

from spupload import SharePointUploader

FOLDER_URL = "https://contoso.sharepoint.com/sites/team/Shared Documents/Reports"


async def main():
    credentials = {
        'client_id': os.environ["SPUPLOAD_CLIENT_ID"],
        'client_secret': os.environ["SPUPLOAD_CLIENT_SECRET"],
    }

    async with SharePointUploader(FOLDER_URL, credentials) as sp:

        # Simple upload to the folder of the URL
        result = await sp.upload("report.pdf")
        print(f"Uploaded: {result.server_relative_url}")

        # Upload with custom name
        result = await sp.upload("q3.xlsx", file_name="2024-Q3.xlsx")
        print(f"Uploaded as: {result.file_name}")

        # Upload to another folder of the same site
        result = await sp.upload("notes.txt", folder="Shared Documents/Archive/2024")
        print(f"Uploaded to archive: {result.server_relative_url}")

        # Upload with progress callback
        def on_progress(progress):
            print(f"Progress: {progress.percent:.1f}%")

        result = await sp.upload("large_file.zip", progress_callback=on_progress)
        print(f"Uploaded {result.size_mb:.2f} MB in {result.chunks} chunks")


if __name__ == "__main__":
    asyncio.run(main())
